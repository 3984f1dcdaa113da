"""
API Initialization - Routes Module.

Registers every HTTP route on the application router.
"""

from aiohttp import web

from api.handlers import health
from api.handlers.admin import auth as admin_auth
from api.handlers.admin import deposits as admin_deposits
from api.handlers.admin import ledger as admin_ledger
from api.handlers.admin import users as admin_users
from api.handlers.admin import withdrawals as admin_withdrawals
from api.handlers.user import account, auth, deposits, investments, withdrawals


def register_user_routes(router: web.UrlDispatcher) -> None:
    """User-facing routes."""
    router.add_post("/api/auth/register", auth.register)
    router.add_post("/api/auth/login", auth.login)

    router.add_get("/api/user/me", account.get_me)
    router.add_get("/api/wallet", account.get_wallet)
    router.add_get("/api/referrals", account.get_referrals)

    router.add_post("/api/deposits", deposits.create_deposit)
    router.add_get("/api/deposits", deposits.list_deposits)

    router.add_get("/api/investments", investments.list_investments)
    router.add_get(
        "/api/investments/available-deposits", investments.list_available_deposits
    )
    router.add_post("/api/investments/start", investments.start_investment)

    router.add_post("/api/withdrawals", withdrawals.create_withdrawal)
    router.add_get("/api/withdrawals", withdrawals.list_withdrawals)


def register_admin_routes(router: web.UrlDispatcher) -> None:
    """Admin console routes."""
    router.add_post("/api/admin/login", admin_auth.admin_login)

    router.add_get("/api/admin/stats", admin_users.get_stats)
    router.add_get("/api/admin/users", admin_users.list_users)
    router.add_get("/api/admin/users/{id}/detail", admin_users.get_user_detail)
    router.add_post("/api/admin/users/{id}/balance", admin_users.set_balance)
    router.add_post("/api/admin/users/{id}/block", admin_users.block_user)
    router.add_post("/api/admin/users/{id}/unblock", admin_users.unblock_user)

    router.add_get("/api/admin/deposits", admin_deposits.list_deposits)
    router.add_post("/api/admin/deposits/{id}/approve", admin_deposits.approve_deposit)
    router.add_post("/api/admin/deposits/{id}/reject", admin_deposits.reject_deposit)

    router.add_get("/api/admin/withdrawals", admin_withdrawals.list_withdrawals)
    router.add_post(
        "/api/admin/withdrawals/{id}/process", admin_withdrawals.process_withdrawal
    )
    router.add_post(
        "/api/admin/withdrawals/{id}/reject", admin_withdrawals.reject_withdrawal
    )

    router.add_get("/api/admin/investments", admin_ledger.list_investments)
    router.add_get("/api/admin/audit-logs", admin_ledger.list_audit_logs)
    router.add_get(
        "/api/admin/referral-commissions", admin_ledger.list_referral_commissions
    )
    router.add_post("/api/admin/sweep", admin_ledger.trigger_sweep)


def register_all_routes(app: web.Application) -> None:
    """Register all routes."""
    app.router.add_get("/health", health.health)
    register_user_routes(app.router)
    register_admin_routes(app.router)
