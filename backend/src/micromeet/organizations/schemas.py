"""Pydantic schemas for organization endpoints"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class OrganizationRename(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class OrganizationResponse(BaseModel):
    id: UUID
    name: str
    role: str
    created_at: datetime
    updated_at: datetime
