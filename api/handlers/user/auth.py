"""
Registration and login.
"""

from aiohttp import web

from api.keys import SESSION, SETTINGS_KEY, TOKEN_SERVICE_KEY
from api.schemas import LoginRequest, RegisterRequest, parse_body
from api.serializers import serialize_user
from app.services.user_service import UserService


async def register(request: web.Request) -> web.Response:
    """POST /api/auth/register"""
    body = await parse_body(request, RegisterRequest)
    service = UserService(
        request[SESSION], bcrypt_rounds=request.app[SETTINGS_KEY].bcrypt_rounds
    )
    user = await service.register(
        full_name=body.full_name,
        email=body.email,
        password=body.password,
        referral_code=body.referral_code,
        device_id=body.device_id,
    )
    token = request.app[TOKEN_SERVICE_KEY].issue(user.id, "user")
    return web.json_response(
        {"token": token, "user": serialize_user(user, referral_count=0)},
        status=201,
    )


async def login(request: web.Request) -> web.Response:
    """POST /api/auth/login"""
    body = await parse_body(request, LoginRequest)
    user = await UserService(request[SESSION]).authenticate(body.email, body.password)
    token = request.app[TOKEN_SERVICE_KEY].issue(user.id, "user")
    return web.json_response({"token": token, "user": serialize_user(user)})
