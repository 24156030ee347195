"""
Activity log service.

Appends one entry per privileged mutation. Appending is best-effort: a
failed append is logged and never undoes the mutation it describes.
"""
import logging
from typing import Optional

from labhub.gateway.base import PersistenceGateway
from labhub.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


class ActivityLogger:

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def record(
        self,
        admin_id: Optional[str],
        action: str,
        entity_type: str,
        entity_id: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> Optional[ActivityLog]:
        try:
            return await self.gateway.create(
                ActivityLog,
                admin_id=admin_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details,
            )
        except Exception as e:
            logger.error(f"Failed to log activity {action!r} on {entity_type}:{entity_id}: {e}")
            return None

    async def list(
        self,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> list[ActivityLog]:
        filters = {}
        if entity_type:
            filters["entity_type"] = entity_type
        if entity_id:
            filters["entity_id"] = entity_id
        return await self.gateway.select(ActivityLog, filters=filters)
