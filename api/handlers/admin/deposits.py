"""
Admin: deposit review.
"""

from aiohttp import web

from api.keys import SESSION, SETTINGS_KEY
from api.middlewares.auth import admin_required
from api.schemas import RejectRequest, parse_body
from api.serializers import serialize_deposit, serialize_investment
from app.services.deposit_service import DepositService
from app.services.investment import InvestmentLifecycleManager
from calculator import format_money


@admin_required
async def list_deposits(request: web.Request) -> web.Response:
    """GET /api/admin/deposits[?status=pending]"""
    deposits = await DepositService(request[SESSION]).list_deposits(
        status=request.query.get("status")
    )
    return web.json_response(
        [serialize_deposit(d, with_user=True) for d in deposits]
    )


@admin_required
async def approve_deposit(request: web.Request) -> web.Response:
    """POST /api/admin/deposits/{id}/approve"""
    config = request.app[SETTINGS_KEY]
    manager = InvestmentLifecycleManager(
        request[SESSION],
        policy=config.lifecycle_policy,
        reward_mode=config.referral_reward_mode,
    )
    result = await manager.approve_deposit(request.match_info["id"])

    body = {
        "deposit": serialize_deposit(result.deposit),
        "investment": (
            serialize_investment(result.investment) if result.investment else None
        ),
        "qualification": None,
    }
    if result.qualification is not None:
        outcome = result.qualification
        body["qualification"] = {
            "totalDeposited": format_money(outcome.total_deposited),
            "crossedThreshold": outcome.crossed_threshold,
            "referrerCredited": outcome.referrer_credited,
            "milestoneBonusPaid": outcome.milestone_bonus_paid,
            "welcomeBonusPaid": outcome.welcome_bonus_paid,
        }
    return web.json_response(body)


@admin_required
async def reject_deposit(request: web.Request) -> web.Response:
    """POST /api/admin/deposits/{id}/reject"""
    body = await parse_body(request, RejectRequest)
    deposit = await DepositService(request[SESSION]).reject_deposit(
        request.match_info["id"], body.reason
    )
    return web.json_response(serialize_deposit(deposit))
