"""Liveness endpoint."""

from aiohttp import web


async def health(request: web.Request) -> web.Response:
    """GET /health"""
    return web.json_response({"status": "ok"})
