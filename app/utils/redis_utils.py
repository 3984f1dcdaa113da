"""Redis connection utilities.

Provides helper functions for creating Redis connections with configuration
from settings to avoid code duplication.
"""

import redis.asyncio as redis

from app.config.settings import Settings, settings


def get_redis_client(config: Settings = settings) -> redis.Redis:
    """
    Create a Redis client with settings from config.

    Connections are opened lazily on first command.

    Args:
        config: Application settings

    Returns:
        redis.Redis: Configured Redis client with decode_responses=True
    """
    return redis.Redis(
        host=config.redis_host,
        port=config.redis_port,
        password=config.redis_password,
        db=config.redis_db,
        decode_responses=True,
        socket_timeout=5,
        socket_connect_timeout=5,
    )


def get_redis_url_masked(config: Settings = settings) -> str:
    """
    Build Redis URL with masked password for safe logging.

    Returns:
        str: Redis connection URL with the password replaced by asterisks
    """
    if config.redis_password:
        return f"redis://:****@{config.redis_host}:{config.redis_port}/{config.redis_db}"
    return f"redis://{config.redis_host}:{config.redis_port}/{config.redis_db}"
