"""
Admin: investments, audit trail, referral commissions and sweep trigger.
"""

from aiohttp import web
from loguru import logger

from api.keys import SESSION, SETTINGS_KEY
from api.middlewares.auth import admin_required
from api.serializers import (
    serialize_audit_log,
    serialize_commission,
    serialize_investment,
)
from app.repositories.audit_log_repository import AuditLogRepository
from app.services.investment import InvestmentLifecycleManager
from app.services.referral import ReferralStatisticsManager
from jobs.tasks.maturity_sweep import process_matured_investments


@admin_required
async def list_investments(request: web.Request) -> web.Response:
    """GET /api/admin/investments"""
    config = request.app[SETTINGS_KEY]
    investments = await InvestmentLifecycleManager(
        request[SESSION],
        policy=config.lifecycle_policy,
        reward_mode=config.referral_reward_mode,
    ).list_investments()
    return web.json_response(
        [serialize_investment(i, with_user=True) for i in investments]
    )


@admin_required
async def list_audit_logs(request: web.Request) -> web.Response:
    """GET /api/admin/audit-logs[?action=...&userId=...]"""
    repo = AuditLogRepository(request[SESSION])
    action = request.query.get("action")
    if action:
        entries = await repo.get_by_action(action, request.query.get("userId"))
    else:
        entries = await repo.get_recent()
    return web.json_response([serialize_audit_log(e) for e in entries])


@admin_required
async def list_referral_commissions(request: web.Request) -> web.Response:
    """GET /api/admin/referral-commissions[?referrerId=...]"""
    commissions = await ReferralStatisticsManager(request[SESSION]).get_commissions(
        request.query.get("referrerId")
    )
    return web.json_response([serialize_commission(c) for c in commissions])


@admin_required
async def trigger_sweep(request: web.Request) -> web.Response:
    """POST /api/admin/sweep"""
    message = process_matured_investments.send()
    logger.info(
        "Maturity sweep enqueued by admin",
        extra={"message_id": message.message_id},
    )
    return web.json_response(
        {"queued": True, "messageId": message.message_id}, status=202
    )
