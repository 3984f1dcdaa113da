"""
Admin: withdrawal processing.
"""

from aiohttp import web

from api.keys import SESSION
from api.middlewares.auth import admin_required
from api.schemas import RejectRequest, parse_body
from api.serializers import serialize_withdrawal
from app.services.withdrawal_service import WithdrawalService


@admin_required
async def list_withdrawals(request: web.Request) -> web.Response:
    """GET /api/admin/withdrawals[?status=pending]"""
    withdrawals = await WithdrawalService(request[SESSION]).list_withdrawals(
        status=request.query.get("status")
    )
    return web.json_response(
        [serialize_withdrawal(w, with_user=True) for w in withdrawals]
    )


@admin_required
async def process_withdrawal(request: web.Request) -> web.Response:
    """POST /api/admin/withdrawals/{id}/process"""
    withdrawal = await WithdrawalService(request[SESSION]).process_withdrawal(
        request.match_info["id"]
    )
    return web.json_response(serialize_withdrawal(withdrawal))


@admin_required
async def reject_withdrawal(request: web.Request) -> web.Response:
    """POST /api/admin/withdrawals/{id}/reject"""
    body = await parse_body(request, RejectRequest)
    withdrawal = await WithdrawalService(request[SESSION]).reject_withdrawal(
        request.match_info["id"], body.reason
    )
    return web.json_response(serialize_withdrawal(withdrawal))
