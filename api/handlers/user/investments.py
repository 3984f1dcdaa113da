"""
Investments: history, deposits awaiting investment, manual start.
"""

from aiohttp import web

from api.keys import SESSION, SETTINGS_KEY, USER_ID
from api.middlewares.auth import user_required
from api.schemas import StartInvestmentRequest, parse_body
from api.serializers import serialize_deposit, serialize_investment
from app.services.investment import InvestmentLifecycleManager


def _lifecycle(request: web.Request) -> InvestmentLifecycleManager:
    config = request.app[SETTINGS_KEY]
    return InvestmentLifecycleManager(
        request[SESSION],
        policy=config.lifecycle_policy,
        reward_mode=config.referral_reward_mode,
    )


@user_required
async def list_investments(request: web.Request) -> web.Response:
    """GET /api/investments"""
    investments = await _lifecycle(request).get_user_investments(request[USER_ID])
    return web.json_response([serialize_investment(i) for i in investments])


@user_required
async def list_available_deposits(request: web.Request) -> web.Response:
    """GET /api/investments/available-deposits"""
    deposits = await _lifecycle(request).get_available_deposits(request[USER_ID])
    return web.json_response([serialize_deposit(d) for d in deposits])


@user_required
async def start_investment(request: web.Request) -> web.Response:
    """POST /api/investments/start"""
    body = await parse_body(request, StartInvestmentRequest)
    investment = await _lifecycle(request).start_investment(
        request[USER_ID], body.deposit_id
    )
    return web.json_response(serialize_investment(investment), status=201)
