"""
Profile, wallet and referral summary.
"""

from aiohttp import web

from api.keys import SESSION, SETTINGS_KEY, USER_ID
from api.middlewares.auth import user_required
from api.serializers import serialize_referral_summary, serialize_user
from app.services.referral import ReferralStatisticsManager
from app.services.user_service import UserService


@user_required
async def get_me(request: web.Request) -> web.Response:
    """GET /api/user/me"""
    profile = await UserService(request[SESSION]).get_profile(request[USER_ID])
    return web.json_response(
        serialize_user(profile["user"], referral_count=profile["referral_count"])
    )


@user_required
async def get_wallet(request: web.Request) -> web.Response:
    """GET /api/wallet"""
    return web.json_response(
        {
            "address": request.app[SETTINGS_KEY].platform_wallet_address,
            "network": "TRC20",
            "currency": "USDT",
        }
    )


@user_required
async def get_referrals(request: web.Request) -> web.Response:
    """GET /api/referrals"""
    summary = await ReferralStatisticsManager(request[SESSION]).get_summary(
        request[USER_ID], request.app[SETTINGS_KEY].referral_reward_mode
    )
    return web.json_response(serialize_referral_summary(summary))
