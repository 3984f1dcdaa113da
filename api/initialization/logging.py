"""
API Initialization - Logging Module.

Configures loguru sinks for the API process.
"""

import sys

from loguru import logger

from app.config.settings import Settings, settings


def setup_logging(config: Settings = settings) -> None:
    """Configure logger with file rotation."""
    logger.remove()
    logger.add(sys.stderr, level=config.log_level)
    logger.add(
        config.log_file,
        rotation="1 day",
        retention="7 days",
        level=config.log_level,
        encoding="utf-8",
    )

    logger.info(f"Starting Yieldly API ({config.environment})...")
