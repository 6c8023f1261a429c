"""
StageHistory Pydantic schemas.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from app.utils.time import ensure_utc


class StageHistoryRead(BaseModel):
    """One entry of a candidate's stage timeline."""

    id: UUID
    candidate_id: UUID
    old_stage: Optional[str] = None
    new_stage: str
    changed_by: Optional[UUID] = None
    changer_name: str = "Unknown"
    comment: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def as_utc(cls, v):
        return ensure_utc(v)

