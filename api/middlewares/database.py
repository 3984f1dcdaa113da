"""
Database middleware.

Opens one AsyncSession per request. Services decide when to commit;
the session is closed (and any open transaction rolled back) when the
request finishes.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web

from api.keys import SESSION, SESSION_MAKER_KEY


@web.middleware
async def database_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Attach a session to the request."""
    async with request.app[SESSION_MAKER_KEY]() as session:
        request[SESSION] = session
        return await handler(request)
