"""
Activity log schemas.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class ActivityLogResponse(BaseModel):
    id: str
    admin_id: Optional[str] = None
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    details: Optional[dict] = None
    created: datetime

    class Config:
        from_attributes = True
