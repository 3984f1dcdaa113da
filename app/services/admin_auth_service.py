"""
Admin authentication.

Single admin account configured in settings. Failed logins are counted
per client address in a fixed window; once the limit is hit every
attempt from that address is refused until the window expires.
"""

import hmac

import bcrypt
from loguru import logger

from app.config.settings import Settings, settings
from app.utils.exceptions import TooManyRequestsError, UnauthorizedError
from app.utils.rate_limiter import RateLimiter
from app.utils.tokens import TokenService


class AdminAuthService:
    """Checks admin credentials and issues admin tokens."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        token_service: TokenService,
        config: Settings = settings,
    ) -> None:
        """
        Initialize admin auth service.

        Args:
            rate_limiter: Failed-attempt counter
            token_service: Token issuer
            config: Application settings
        """
        self.rate_limiter = rate_limiter
        self.token_service = token_service
        self.config = config
        self.logger = logger.bind(service=self.__class__.__name__)

    async def login(
        self, username: str | None, password: str | None, client_address: str
    ) -> str:
        """
        Log the admin in.

        Args:
            username: Admin username
            password: Plain text password
            client_address: Caller address used as rate-limit key

        Returns:
            Admin bearer token

        Raises:
            TooManyRequestsError: If the address is locked out
            UnauthorizedError: On bad credentials
        """
        key = f"admin_login:{client_address}"
        attempts = await self.rate_limiter.get_count(key)
        if attempts >= self.config.admin_login_max_attempts:
            self.logger.warning(
                "Admin login refused, too many attempts",
                extra={"client_address": client_address, "attempts": attempts},
            )
            raise TooManyRequestsError(
                "Too many login attempts. Try again later"
            )

        if not self._check_credentials(username, password):
            attempts = await self.rate_limiter.hit(key)
            self.logger.warning(
                "Admin login failed",
                extra={"client_address": client_address, "attempts": attempts},
            )
            raise UnauthorizedError("Invalid credentials")

        await self.rate_limiter.reset(key)
        self.logger.info(
            "Admin logged in", extra={"client_address": client_address}
        )
        return self.token_service.issue(self.config.admin_username, "admin")

    def _check_credentials(self, username: str | None, password: str | None) -> bool:
        if not username or not password or not self.config.admin_password_hash:
            return False
        if not hmac.compare_digest(
            username.encode(), self.config.admin_username.encode()
        ):
            return False
        try:
            return bcrypt.checkpw(
                password.encode(), self.config.admin_password_hash.encode()
            )
        except ValueError:
            self.logger.error("ADMIN_PASSWORD_HASH is not a valid bcrypt hash")
            return False
