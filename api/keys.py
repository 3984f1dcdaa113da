"""
Application state keys.

Typed aiohttp AppKeys for shared objects, and RequestKeys for per-request
values set by middlewares and auth decorators.
"""

from aiohttp import web
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config.settings import Settings
from app.utils.rate_limiter import RateLimiter
from app.utils.tokens import TokenService

SETTINGS_KEY = web.AppKey("settings", Settings)
SESSION_MAKER_KEY = web.AppKey("session_maker", async_sessionmaker[AsyncSession])
TOKEN_SERVICE_KEY = web.AppKey("token_service", TokenService)
RATE_LIMITER_KEY = web.AppKey("rate_limiter", RateLimiter)

# Per-request values
SESSION = web.RequestKey("session", AsyncSession)
USER_ID = web.RequestKey("user_id", str)
ADMIN = web.RequestKey("admin", bool)
