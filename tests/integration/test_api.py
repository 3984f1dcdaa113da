"""
HTTP API tests.

Run the real aiohttp application against the in-memory database.
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from api.keys import ADMIN, SESSION, USER_ID
from api.main import create_app
from app.config.settings import settings
from app.utils.rate_limiter import InMemoryFixedWindowRateLimiter
from app.utils.tokens import TokenService

ADDRESS = "TLfixnZVqzmTp2UhQwHjPiiV9eK3NemLy7"

# Untyped request or app keys fail the request instead of warning
pytestmark = pytest.mark.filterwarnings("error::aiohttp.web.NotAppKeyWarning")


def test_request_keys_are_typed() -> None:
    for key in (SESSION, USER_ID, ADMIN):
        assert isinstance(key, web.RequestKey)


@pytest_asyncio.fixture
async def client(session_maker):
    """Test client for the API app."""
    app = create_app(
        config=settings,
        session_maker=session_maker,
        rate_limiter=InMemoryFixedWindowRateLimiter(60),
        token_service=TokenService("api-test-secret", 3600, 600),
    )
    client = TestClient(TestServer(app))
    await client.start_server()
    yield client
    await client.close()


@pytest.fixture
def register(client):
    """Register a user through the API and return (token, user)."""
    counter = {"n": 0}

    async def _register(**overrides):
        counter["n"] += 1
        payload = {
            "fullName": f"Api User {counter['n']}",
            "email": f"api{counter['n']}@example.com",
            "password": "password123",
        }
        payload.update(overrides)
        resp = await client.post("/api/auth/register", json=payload)
        assert resp.status == 201, await resp.text()
        data = await resp.json()
        return data["token"], data["user"]

    return _register


@pytest_asyncio.fixture
async def admin_headers(client, admin_password):
    resp = await client.post(
        "/api/admin/login", json={"username": "admin", "password": admin_password}
    )
    assert resp.status == 200
    token = (await resp.json())["token"]
    return {"Authorization": f"Bearer {token}"}


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestPublicEndpoints:
    """Health and authentication."""

    @pytest.mark.asyncio
    async def test_health(self, client) -> None:
        resp = await client.get("/health")
        assert resp.status == 200
        assert await resp.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_register_and_login(self, client, register) -> None:
        token, user = await register(email="flow@example.com")

        assert user["email"] == "flow@example.com"
        assert user["balance"] == "0.000000"
        assert user["totalYieldPercent"] == 10
        assert user["referralCount"] == 0
        assert "passwordHash" not in user

        resp = await client.post(
            "/api/auth/login",
            json={"email": "flow@example.com", "password": "password123"},
        )
        assert resp.status == 200
        assert (await resp.json())["user"]["id"] == user["id"]

    @pytest.mark.asyncio
    async def test_register_duplicate(self, client, register) -> None:
        await register(email="dup@example.com")
        resp = await client.post(
            "/api/auth/register",
            json={"fullName": "Dup", "email": "dup@example.com", "password": "password123"},
        )
        assert resp.status == 409
        assert (await resp.json())["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_wrong_password(self, client, register) -> None:
        await register(email="pw@example.com")
        resp = await client.post(
            "/api/auth/login", json={"email": "pw@example.com", "password": "nope-nope"}
        )
        assert resp.status == 401

    @pytest.mark.asyncio
    async def test_malformed_json(self, client) -> None:
        resp = await client.post(
            "/api/auth/login",
            data="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status == 400
        assert (await resp.json())["message"] == "Invalid JSON body"

    @pytest.mark.asyncio
    async def test_missing_field(self, client) -> None:
        resp = await client.post("/api/auth/login", json={"email": "a@example.com"})
        assert resp.status == 400
        assert (await resp.json())["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_unknown_route(self, client) -> None:
        resp = await client.get("/api/nope")
        assert resp.status == 404
        assert (await resp.json())["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_token_required(self, client) -> None:
        resp = await client.get("/api/user/me")
        assert resp.status == 401

        resp = await client.get("/api/user/me", headers=bearer("garbage"))
        assert resp.status == 401


class TestUserEndpoints:
    """Authenticated user flows."""

    @pytest.mark.asyncio
    async def test_profile_and_wallet(self, client, register) -> None:
        token, user = await register()

        resp = await client.get("/api/user/me", headers=bearer(token))
        assert resp.status == 200
        assert (await resp.json())["id"] == user["id"]

        resp = await client.get("/api/wallet", headers=bearer(token))
        wallet = await resp.json()
        assert wallet["network"] == "TRC20"
        assert wallet["currency"] == "USDT"
        assert wallet["address"] == settings.platform_wallet_address

    @pytest.mark.asyncio
    async def test_submit_and_list_deposit(self, client, register) -> None:
        token, _ = await register()

        resp = await client.post(
            "/api/deposits",
            json={"amount": 25.5, "txid": "tx-1", "screenshotUrl": "https://x/1.png"},
            headers=bearer(token),
        )
        assert resp.status == 201
        deposit = await resp.json()
        assert deposit["amount"] == "25.500000"
        assert deposit["status"] == "pending"

        resp = await client.get("/api/deposits", headers=bearer(token))
        assert [d["id"] for d in await resp.json()] == [deposit["id"]]

    @pytest.mark.asyncio
    async def test_deposit_below_minimum(self, client, register) -> None:
        token, _ = await register()
        resp = await client.post(
            "/api/deposits",
            json={"amount": "4", "txid": "tx-1", "screenshotUrl": "https://x/1.png"},
            headers=bearer(token),
        )
        assert resp.status == 400
        assert (await resp.json())["message"] == "Minimum deposit is 5 USDT"

    @pytest.mark.asyncio
    async def test_withdrawal_insufficient_funds(self, client, register) -> None:
        token, _ = await register()
        resp = await client.post(
            "/api/withdrawals",
            json={"amount": "50", "usdtAddress": ADDRESS},
            headers=bearer(token),
        )
        assert resp.status == 400
        assert (await resp.json())["error"] == "insufficient_funds"

        resp = await client.get("/api/withdrawals", headers=bearer(token))
        assert await resp.json() == []

    @pytest.mark.asyncio
    async def test_start_refused_under_auto_policy(self, client, register) -> None:
        token, _ = await register()
        resp = await client.post(
            "/api/investments/start",
            json={"depositId": "whatever"},
            headers=bearer(token),
        )
        assert resp.status == 409


class TestAdminEndpoints:
    """Admin console flows."""

    @pytest.mark.asyncio
    async def test_admin_routes_reject_user_tokens(self, client, register) -> None:
        token, _ = await register()
        resp = await client.get("/api/admin/stats", headers=bearer(token))
        assert resp.status == 401

    @pytest.mark.asyncio
    async def test_admin_login_lockout(self, client, admin_password) -> None:
        for _ in range(settings.admin_login_max_attempts):
            resp = await client.post(
                "/api/admin/login", json={"username": "admin", "password": "bad-pass"}
            )
            assert resp.status == 401

        resp = await client.post(
            "/api/admin/login", json={"username": "admin", "password": admin_password}
        )
        assert resp.status == 429

    @pytest.mark.asyncio
    async def test_referral_deposit_approval(
        self, client, register, admin_headers
    ) -> None:
        """End to end: referred user's $60 deposit qualifies the referrer."""
        referrer_token, referrer = await register()
        token, _ = await register(referralCode=referrer["referralCode"])

        resp = await client.post(
            "/api/deposits",
            json={"amount": "60", "txid": "tx-60", "screenshotUrl": "https://x/1.png"},
            headers=bearer(token),
        )
        deposit_id = (await resp.json())["id"]

        resp = await client.get(
            "/api/admin/deposits", params={"status": "pending"}, headers=admin_headers
        )
        pending = await resp.json()
        assert [d["id"] for d in pending] == [deposit_id]
        assert pending[0]["user"]["fullName"]

        resp = await client.post(
            f"/api/admin/deposits/{deposit_id}/approve", headers=admin_headers
        )
        assert resp.status == 200
        body = await resp.json()
        assert body["deposit"]["status"] == "approved"
        assert body["investment"]["amount"] == "60.000000"
        assert body["investment"]["profitRate"] == 10
        assert body["qualification"]["referrerCredited"] is True
        assert body["qualification"]["welcomeBonusPaid"] is True

        resp = await client.post(
            f"/api/admin/deposits/{deposit_id}/approve", headers=admin_headers
        )
        assert resp.status == 409

        resp = await client.get("/api/referrals", headers=bearer(referrer_token))
        summary = await resp.json()
        assert summary["qualifiedReferrals"] == 1
        assert summary["currentYield"] == 11
        assert summary["referrals"][0]["isQualified"] is True

        resp = await client.get("/api/user/me", headers=bearer(token))
        assert (await resp.json())["balance"] == "5.000000"

        resp = await client.get(
            "/api/admin/referral-commissions",
            params={"referrerId": referrer["id"]},
            headers=admin_headers,
        )
        assert len(await resp.json()) == 1

        resp = await client.get(
            "/api/admin/audit-logs",
            params={"action": "referral_qualified"},
            headers=admin_headers,
        )
        entries = await resp.json()
        assert len(entries) == 1
        assert entries[0]["details"]["qualified_referrals"] == 1

    @pytest.mark.asyncio
    async def test_withdrawal_review(self, client, register, admin_headers) -> None:
        token, user = await register()

        resp = await client.post(
            f"/api/admin/users/{user['id']}/balance",
            json={"balance": "100", "reason": "Opening credit"},
            headers=admin_headers,
        )
        assert resp.status == 200
        assert (await resp.json())["balance"] == "100.000000"

        resp = await client.post(
            "/api/withdrawals",
            json={"amount": "40", "usdtAddress": ADDRESS},
            headers=bearer(token),
        )
        assert resp.status == 201
        withdrawal_id = (await resp.json())["id"]

        resp = await client.post(
            f"/api/admin/withdrawals/{withdrawal_id}/reject",
            json={"reason": "Address mismatch"},
            headers=admin_headers,
        )
        assert resp.status == 200
        assert (await resp.json())["status"] == "rejected"

        resp = await client.get("/api/user/me", headers=bearer(token))
        assert (await resp.json())["balance"] == "100.000000"

        resp = await client.post(
            f"/api/admin/withdrawals/{withdrawal_id}/process", headers=admin_headers
        )
        assert resp.status == 409

    @pytest.mark.asyncio
    async def test_block_user(self, client, register, admin_headers) -> None:
        token, user = await register(email="blockme@example.com")

        resp = await client.post(
            f"/api/admin/users/{user['id']}/block", headers=admin_headers
        )
        assert (await resp.json())["isBlocked"] is True

        resp = await client.post(
            "/api/auth/login",
            json={"email": "blockme@example.com", "password": "password123"},
        )
        assert resp.status == 403

        resp = await client.post(
            f"/api/admin/users/{user['id']}/unblock", headers=admin_headers
        )
        assert (await resp.json())["isBlocked"] is False

    @pytest.mark.asyncio
    async def test_stats_and_detail(self, client, register, admin_headers) -> None:
        _, user = await register()

        resp = await client.get("/api/admin/stats", headers=admin_headers)
        stats = await resp.json()
        assert stats["totalUsers"] == 1
        assert stats["totalDeposits"] == "0.000000"

        resp = await client.get(
            f"/api/admin/users/{user['id']}/detail", headers=admin_headers
        )
        detail = await resp.json()
        assert detail["user"]["id"] == user["id"]
        assert detail["deposits"] == []

        resp = await client.get("/api/admin/users/missing/detail", headers=admin_headers)
        assert resp.status == 404

    @pytest.mark.asyncio
    async def test_trigger_sweep_enqueues(self, client, admin_headers) -> None:
        resp = await client.post("/api/admin/sweep", headers=admin_headers)
        assert resp.status == 202
        body = await resp.json()
        assert body["queued"] is True
        assert body["messageId"]

    @pytest.mark.asyncio
    async def test_investments_listing(
        self, client, admin_headers, create_user, create_investment
    ) -> None:
        user = await create_user()
        await create_investment(user, "100", "13")

        resp = await client.get("/api/admin/investments", headers=admin_headers)
        investments = await resp.json()
        assert len(investments) == 1
        assert investments[0]["profitRate"] == 13
        assert investments[0]["user"]["id"] == user.id
        assert Decimal(investments[0]["amount"]) == Decimal("100")
