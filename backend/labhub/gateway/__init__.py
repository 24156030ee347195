"""
Persistence gateway: one interface, chosen once at startup.
"""
import logging

from labhub.core.config import Settings
from labhub.db.base import create_engine
from labhub.gateway.base import PersistenceGateway
from labhub.gateway.memory import InMemoryGateway
from labhub.gateway.sql import SqlGateway

logger = logging.getLogger(__name__)


def build_gateway(settings: Settings) -> PersistenceGateway:
    """Build the store selected by ``USE_MOCK_STORE``."""
    if settings.USE_MOCK_STORE:
        logger.warning("Using the in-memory store - no data will be persisted")
        return InMemoryGateway()
    logger.info("Using database store")
    return SqlGateway(create_engine(settings.DATABASE_URL, echo=settings.DEBUG))


__all__ = ["PersistenceGateway", "InMemoryGateway", "SqlGateway", "build_gateway"]
