"""HTTP middlewares and auth decorators."""

from api.middlewares.auth import admin_required, user_required
from api.middlewares.database import database_middleware
from api.middlewares.error_handler import error_middleware

__all__ = [
    "admin_required",
    "database_middleware",
    "error_middleware",
    "user_required",
]
