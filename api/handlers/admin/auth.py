"""
Admin login.
"""

from aiohttp import web

from api.keys import RATE_LIMITER_KEY, SETTINGS_KEY, TOKEN_SERVICE_KEY
from api.schemas import AdminLoginRequest, parse_body
from app.services.admin_auth_service import AdminAuthService


def client_address(request: web.Request) -> str:
    """Caller address for rate limiting (peer address, headers are not trusted)."""
    return request.remote or "unknown"


async def admin_login(request: web.Request) -> web.Response:
    """POST /api/admin/login"""
    body = await parse_body(request, AdminLoginRequest)
    service = AdminAuthService(
        rate_limiter=request.app[RATE_LIMITER_KEY],
        token_service=request.app[TOKEN_SERVICE_KEY],
        config=request.app[SETTINGS_KEY],
    )
    token = await service.login(body.username, body.password, client_address(request))
    return web.json_response({"token": token})
