"""
Admin: statistics and user management.
"""

from aiohttp import web

from api.keys import SESSION, SETTINGS_KEY
from api.middlewares.auth import admin_required
from api.schemas import BalanceRequest, parse_body
from api.serializers import (
    serialize_deposit,
    serialize_investment,
    serialize_stats,
    serialize_user,
    serialize_withdrawal,
)
from app.services.stats_service import StatsService
from app.services.user_service import UserService


@admin_required
async def get_stats(request: web.Request) -> web.Response:
    """GET /api/admin/stats"""
    stats = await StatsService(
        request[SESSION], request.app[SETTINGS_KEY].referral_reward_mode
    ).get_platform_stats()
    return web.json_response(serialize_stats(stats))


@admin_required
async def list_users(request: web.Request) -> web.Response:
    """GET /api/admin/users"""
    rows = await UserService(request[SESSION]).list_users()
    return web.json_response(
        [serialize_user(row["user"], row["referral_count"]) for row in rows]
    )


@admin_required
async def get_user_detail(request: web.Request) -> web.Response:
    """GET /api/admin/users/{id}/detail"""
    detail = await UserService(request[SESSION]).get_user_detail(
        request.match_info["id"]
    )
    return web.json_response(
        {
            "user": serialize_user(
                detail["user"], referral_count=len(detail["referrals"])
            ),
            "deposits": [serialize_deposit(d) for d in detail["deposits"]],
            "investments": [serialize_investment(i) for i in detail["investments"]],
            "withdrawals": [serialize_withdrawal(w) for w in detail["withdrawals"]],
            "referrals": [serialize_user(r) for r in detail["referrals"]],
        }
    )


@admin_required
async def set_balance(request: web.Request) -> web.Response:
    """POST /api/admin/users/{id}/balance"""
    body = await parse_body(request, BalanceRequest)
    user = await UserService(request[SESSION]).set_balance(
        request.match_info["id"], body.balance, body.reason
    )
    return web.json_response(serialize_user(user))


@admin_required
async def block_user(request: web.Request) -> web.Response:
    """POST /api/admin/users/{id}/block"""
    user = await UserService(request[SESSION]).set_blocked(
        request.match_info["id"], True
    )
    return web.json_response(serialize_user(user))


@admin_required
async def unblock_user(request: web.Request) -> web.Response:
    """POST /api/admin/users/{id}/unblock"""
    user = await UserService(request[SESSION]).set_blocked(
        request.match_info["id"], False
    )
    return web.json_response(serialize_user(user))
