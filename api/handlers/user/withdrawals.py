"""
Withdrawal requests and history.
"""

from aiohttp import web

from api.keys import SESSION, USER_ID
from api.middlewares.auth import user_required
from api.schemas import WithdrawalRequest, parse_body
from api.serializers import serialize_withdrawal
from app.services.withdrawal_service import WithdrawalService


@user_required
async def create_withdrawal(request: web.Request) -> web.Response:
    """POST /api/withdrawals"""
    body = await parse_body(request, WithdrawalRequest)
    withdrawal = await WithdrawalService(request[SESSION]).submit_withdrawal(
        user_id=request[USER_ID],
        amount=body.amount,
        usdt_address=body.usdt_address,
    )
    return web.json_response(serialize_withdrawal(withdrawal), status=201)


@user_required
async def list_withdrawals(request: web.Request) -> web.Response:
    """GET /api/withdrawals"""
    withdrawals = await WithdrawalService(request[SESSION]).get_user_withdrawals(
        request[USER_ID]
    )
    return web.json_response([serialize_withdrawal(w) for w in withdrawals])
