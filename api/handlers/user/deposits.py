"""
Deposit submission and history.
"""

from aiohttp import web

from api.keys import SESSION, USER_ID
from api.middlewares.auth import user_required
from api.schemas import DepositRequest, parse_body
from api.serializers import serialize_deposit
from app.services.deposit_service import DepositService


@user_required
async def create_deposit(request: web.Request) -> web.Response:
    """POST /api/deposits"""
    body = await parse_body(request, DepositRequest)
    deposit = await DepositService(request[SESSION]).submit_deposit(
        user_id=request[USER_ID],
        amount=body.amount,
        txid=body.txid,
        screenshot_url=body.screenshot_url,
    )
    return web.json_response(serialize_deposit(deposit), status=201)


@user_required
async def list_deposits(request: web.Request) -> web.Response:
    """GET /api/deposits"""
    deposits = await DepositService(request[SESSION]).get_user_deposits(
        request[USER_ID]
    )
    return web.json_response([serialize_deposit(d) for d in deposits])
