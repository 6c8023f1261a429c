"""
Statistics and day planner schemas.
"""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel


class StageCount(BaseModel):
    """One slice of a stage distribution chart."""

    name: str
    value: int
    color: str


class AdminCount(BaseModel):
    user_id: Optional[UUID] = None
    name: str
    count: int


class OverviewStats(BaseModel):
    total_candidates: int
    total_admins: int
    this_month: int
    this_week: int
    stage_distribution: List[StageCount]
    top_admins: List[AdminCount]


class MyStats(BaseModel):
    """Totals for the signed-in admin with growth against the previous period."""

    total: int
    this_month: int
    this_week: int
    total_growth: int
    month_growth: int
    week_growth: int
    stage_distribution: List[StageCount]


class DailyCount(BaseModel):
    date: str
    count: int


class KeyStageCandidate(BaseModel):
    id: UUID
    full_name: str
    stage: str
    stage_color: str
    position_name: Optional[str] = None
    client_name: Optional[str] = None
    days_since_update: int


class AdminPerformance(BaseModel):
    user_id: UUID
    full_name: str
    email: str
    total: int
    this_month: int
    this_week: int
    today: int
    avg_per_day: float
    stage_data: List[StageCount]
    daily_trend: List[DailyCount]
    key_stage_candidates: List[KeyStageCandidate]


class PlannerItem(BaseModel):
    """A candidate that needs attention today."""

    id: UUID
    full_name: str
    stage: str
    stage_color: str
    action: str
    position_name: Optional[str] = None
    client_name: Optional[str] = None
    days_since_update: int


class PlannerStage(BaseModel):
    stage: str
    count: int
    color: str
    candidates: List[PlannerItem]


class PlannerGroup(BaseModel):
    label: str
    emoji: str
    color: str
    count: int
    percentage: int
    stages: List[PlannerStage]


class DayPlanner(BaseModel):
    urgent: List[PlannerItem]
    follow_up: List[PlannerItem]
    updated_today: int
    stale: int
    active: int
    total: int
    conversion_rate: int
    groups: List[PlannerGroup]
