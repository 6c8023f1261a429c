"""
Candidate Pydantic schemas.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from app.core.pipeline_config import (
    DEFAULT_STAGE,
    STAGE_TO_GROUP,
    color_of,
    is_known_stage,
    suggested_action,
    variant_of,
)
from app.schemas.base import TimestampedRead, strip_or_none

NOTE_MAX_LENGTH = 1000

_OPTIONAL_TEXT_FIELDS = (
    "gender", "designation", "company", "experience", "qualification", "industry",
    "current_ctc", "expected_ctc", "notice_period", "position_name", "client_name",
    "resume_url", "comment", "notes",
)
_REQUIRED_TEXT_FIELDS = ("full_name", "email", "phone", "city")


def _check_stage(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not is_known_stage(value):
        raise ValueError(f"Unknown stage: {value}")
    return value


class CandidateBase(BaseModel):
    """Fields shared by create and update payloads."""

    gender: Optional[str] = Field(None, max_length=20)
    designation: Optional[str] = Field(None, max_length=100)
    company: Optional[str] = Field(None, max_length=100)
    experience: Optional[str] = Field(None, max_length=50)
    qualification: Optional[str] = Field(None, max_length=100)
    industry: Optional[str] = Field(None, max_length=100)
    current_ctc: Optional[str] = Field(None, max_length=50)
    expected_ctc: Optional[str] = Field(None, max_length=50)
    notice_period: Optional[str] = Field(None, max_length=50)
    position_name: Optional[str] = Field(None, max_length=100)
    client_name: Optional[str] = Field(None, max_length=100)
    date_of_sharing: Optional[date] = None
    resume_url: Optional[str] = Field(None, max_length=1000)
    comment: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)
    notes: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)

    @field_validator(*_OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return strip_or_none(v)


class CandidateCreate(CandidateBase):
    """Schema for creating a new candidate."""

    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    city: str = Field(..., min_length=1, max_length=100)
    stage: str = DEFAULT_STAGE

    @field_validator(*_REQUIRED_TEXT_FIELDS, mode="before")
    @classmethod
    def strip_required(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("stage")
    @classmethod
    def validate_stage(cls, v):
        return _check_stage(v)


class CandidateUpdate(CandidateBase):
    """Schema for updating a candidate. Only the fields sent are changed."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=20)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    stage: Optional[str] = None

    @field_validator(*_REQUIRED_TEXT_FIELDS, "stage", mode="before")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be empty")
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("stage")
    @classmethod
    def validate_stage(cls, v):
        return _check_stage(v)


class CandidateRead(TimestampedRead):
    """Schema for reading candidate data, with the stage rendering metadata."""

    full_name: str
    email: str
    phone: str
    gender: Optional[str] = None
    city: str
    designation: Optional[str] = None
    company: Optional[str] = None
    experience: Optional[str] = None
    qualification: Optional[str] = None
    industry: Optional[str] = None
    current_ctc: Optional[str] = None
    expected_ctc: Optional[str] = None
    notice_period: Optional[str] = None
    position_name: Optional[str] = None
    client_name: Optional[str] = None
    date_of_sharing: Optional[date] = None
    resume_url: Optional[str] = None
    comment: Optional[str] = None
    notes: Optional[str] = None
    stage: str
    created_by: Optional[UUID] = None

    stage_group: Optional[str] = None
    stage_color: str = ""
    stage_variant: str = ""
    suggested_action: str = ""
    added_by_name: Optional[str] = None

    @model_validator(mode="after")
    def fill_stage_metadata(self):
        self.stage_group = STAGE_TO_GROUP.get(self.stage)
        self.stage_color = color_of(self.stage)
        self.stage_variant = variant_of(self.stage)
        self.suggested_action = suggested_action(self.stage)
        return self


class CandidateWriteResponse(BaseModel):
    """Created or updated candidate plus non-blocking warnings."""

    candidate: CandidateRead
    warnings: List[str] = []


class StageChangeRequest(BaseModel):
    """Move a candidate to another stage, or comment on the current one."""

    new_stage: str
    comment: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)

    @field_validator("comment", mode="before")
    @classmethod
    def blank_comment(cls, v):
        return strip_or_none(v)

    @field_validator("new_stage")
    @classmethod
    def validate_stage(cls, v):
        return _check_stage(v)


class BulkDeleteRequest(BaseModel):
    """Candidates to delete in one call."""

    ids: List[UUID] = Field(..., min_length=1)


class BulkDeleteResponse(BaseModel):
    deleted: int
