"""
Pipeline taxonomy schemas.
"""

from typing import List, Optional

from pydantic import BaseModel


class PipelineGroupRead(BaseModel):
    label: str
    emoji: str
    color: str
    stages: List[str]


class StageInfo(BaseModel):
    """Everything a client needs to render and reason about one stage."""

    name: str
    group: Optional[str] = None
    color: str
    variant: str
    suggested_action: str
    is_active: bool
    is_closed: bool
    is_urgent: bool
    is_follow_up: bool
    is_success: bool
