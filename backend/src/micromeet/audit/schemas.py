"""Pydantic schemas for audit log endpoints"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class AuditLogResponse(BaseModel):
    id: UUID
    org_id: UUID
    actor_id: Optional[UUID]
    action: str
    entity_type: Optional[str]
    entity_id: Optional[UUID]
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="metadata_json")
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class AuditLogListResponse(BaseModel):
    entries: List[AuditLogResponse]
    total: int
    page: int
    per_page: int
