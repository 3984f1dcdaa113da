"""Bearer token utilities.

Tokens are Fernet-encrypted JSON payloads. Fernet embeds the issue time,
so expiry is checked with the ttl argument on decrypt and no token state
is stored server-side.
"""

import base64
import hashlib
import json
from typing import Literal

from cryptography.fernet import Fernet, InvalidToken
from loguru import logger

from app.utils.exceptions import UnauthorizedError

TokenType = Literal["user", "admin"]


def derive_fernet_key(secret_key: str) -> bytes:
    """
    Derive a Fernet key from an arbitrary secret string.

    Args:
        secret_key: Application secret

    Returns:
        Url-safe base64-encoded 32-byte key
    """
    digest = hashlib.sha256(secret_key.encode()).digest()
    return base64.urlsafe_b64encode(digest)


class TokenService:
    """
    Issues and verifies bearer tokens.

    Uses Fernet (symmetric authenticated encryption) so payloads cannot be
    read or forged without the secret.
    """

    def __init__(
        self,
        secret_key: str,
        user_ttl_seconds: int,
        admin_ttl_seconds: int,
    ) -> None:
        """
        Initialize token service.

        Args:
            secret_key: Application secret
            user_ttl_seconds: Lifetime of user tokens
            admin_ttl_seconds: Lifetime of admin tokens
        """
        self.fernet = Fernet(derive_fernet_key(secret_key))
        self.ttls: dict[str, int] = {
            "user": user_ttl_seconds,
            "admin": admin_ttl_seconds,
        }

    def issue(self, subject: str, token_type: TokenType) -> str:
        """
        Issue a token.

        Args:
            subject: User ID or admin username
            token_type: "user" or "admin"

        Returns:
            Token string
        """
        payload = json.dumps({"sub": subject, "type": token_type})
        return self.fernet.encrypt(payload.encode()).decode()

    def verify(self, token: str, token_type: TokenType) -> str:
        """
        Verify a token and return its subject.

        Args:
            token: Token string
            token_type: Expected token type

        Returns:
            Subject stored in the token

        Raises:
            UnauthorizedError: If the token is invalid, expired or of the
                wrong type
        """
        try:
            raw = self.fernet.decrypt(token.encode(), ttl=self.ttls[token_type])
            payload = json.loads(raw)
        except (InvalidToken, ValueError) as e:
            logger.debug(f"Token rejected: {type(e).__name__}")
            raise UnauthorizedError("Invalid or expired token") from e

        if payload.get("type") != token_type or not payload.get("sub"):
            raise UnauthorizedError("Invalid or expired token")

        return str(payload["sub"])
