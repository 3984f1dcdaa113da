"""
Dramatiq broker configuration.

Redis-backed broker for out-of-band jobs. Tests get an in-memory
StubBroker so importing actors never touches Redis.
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from dramatiq.brokers.stub import StubBroker
from dramatiq.middleware import CurrentMessage
from loguru import logger

from app.config.settings import settings
from app.utils.redis_utils import get_redis_url_masked


def create_broker() -> dramatiq.Broker:
    """
    Build the broker for the current environment.

    Returns:
        StubBroker under ENVIRONMENT=test, RedisBroker otherwise
    """
    if settings.environment == "test":
        stub_broker = StubBroker()
        stub_broker.emit_after("process_boot")
        return stub_broker

    redis_broker = RedisBroker(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password or None,
        db=settings.redis_db,
    )
    # Retries are left to each actor; money-moving actors disable them
    redis_broker.add_middleware(CurrentMessage())
    logger.info(f"Dramatiq broker initialized: {get_redis_url_masked()}")
    return redis_broker


broker = create_broker()
dramatiq.set_broker(broker)
