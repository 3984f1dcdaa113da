"""
Bearer token authentication.

Handlers opt in with @user_required or @admin_required; the decorator
verifies the token and stores the subject on the request.
"""

import functools
from collections.abc import Awaitable, Callable

from aiohttp import web

from api.keys import ADMIN, TOKEN_SERVICE_KEY, USER_ID
from app.utils.exceptions import UnauthorizedError
from app.utils.tokens import TokenType

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def get_bearer_token(request: web.Request) -> str:
    """
    Extract bearer token from the Authorization header.

    Raises:
        UnauthorizedError: If the header is missing or malformed
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Authentication required")
    return token.strip()


def _token_required(token_type: TokenType, request_key: str) -> Callable[[Handler], Handler]:
    def decorator(handler: Handler) -> Handler:
        @functools.wraps(handler)
        async def wrapper(request: web.Request) -> web.StreamResponse:
            token = get_bearer_token(request)
            request[request_key] = request.app[TOKEN_SERVICE_KEY].verify(
                token, token_type
            )
            return await handler(request)

        return wrapper

    return decorator


user_required = _token_required("user", USER_ID)
admin_required = _token_required("admin", ADMIN)
