"""
Global Error Handler Middleware.

Renders PlatformError subclasses as JSON with their status code. Any
other exception is logged with its traceback and answered with a
generic 500; callers never see technical details.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web
from loguru import logger

from app.utils.exceptions import PlatformError, ServerError


def error_response(status: int, error_code: str, message: str) -> web.Response:
    """Build the JSON error body."""
    return web.json_response(
        {"error": error_code, "message": message}, status=status
    )


@web.middleware
async def error_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Translate exceptions into JSON error responses."""
    try:
        return await handler(request)
    except PlatformError as e:
        if e.status_code >= 500:
            logger.exception(
                "Server error",
                extra={"path": request.path, "error_code": e.error_code},
            )
        return error_response(e.status_code, e.error_code, e.message)
    except web.HTTPException as e:
        if e.status < 400:
            raise
        return error_response(
            e.status, e.reason.lower().replace(" ", "_"), e.reason
        )
    except Exception:
        logger.exception(
            "Unhandled exception",
            extra={"path": request.path, "method": request.method},
        )
        return error_response(
            ServerError.status_code,
            ServerError.error_code,
            ServerError.default_message,
        )
