"""
Statistics and day planner service.

The pure helpers at the top of the module do the arithmetic; the service
class only gathers the numbers from the database.
"""

import math
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.permissions import Roles
from app.core.pipeline_config import (
    CLOSED_GROUP_LABEL,
    KEY_STAGES,
    PIPELINE_GROUPS,
    categorize,
    color_of,
    suggested_action,
)
from app.errors import AppError
from app.models.candidate import Candidate
from app.models.user import User
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.user_repository import UserRepository
from app.schemas.stats import (
    AdminCount,
    AdminPerformance,
    DailyCount,
    DayPlanner,
    KeyStageCandidate,
    MyStats,
    OverviewStats,
    PlannerGroup,
    PlannerItem,
    PlannerStage,
    StageCount,
)
from app.services.candidate_service import UNKNOWN_USER_NAME
from app.utils.time import (
    days_between,
    ensure_utc,
    is_same_day,
    start_of_day,
    start_of_month,
    start_of_previous_month,
    start_of_week,
    utc_now,
)

SUNDAY = 6
MONDAY = 0
TREND_DAYS = 30
TOP_ADMINS = 5
KEY_STAGE_LIMIT = 15
PLANNER_SAMPLE_SIZE = 6
FOLLOW_UP_DEFAULT_ACTION = "Follow up"
TREND_LABEL_FORMAT = "%b %d"


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def calculate_growth(current: int, previous: int) -> int:
    """Percentage change against the previous period; 100 when starting from zero."""
    if previous == 0:
        return 100 if current > 0 else 0
    return int(round_half_up((current - previous) / previous * 100))


def percentage(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return int(round_half_up(part / whole * 100))


def stage_distribution(pairs: Iterable[Tuple[str, int]]) -> List[StageCount]:
    """Chart slices, largest stage first."""
    ordered = sorted(pairs, key=lambda pair: -pair[1])
    return [StageCount(name=stage, value=count, color=color_of(stage)) for stage, count in ordered]


def daily_trend(created_at: Iterable[datetime], now: datetime, days: int = TREND_DAYS) -> List[DailyCount]:
    """Candidates added per day over the last ``days`` days, oldest day first."""
    today = start_of_day(now)
    buckets = OrderedDict()
    for offset in range(days - 1, -1, -1):
        buckets[(today - timedelta(days=offset)).date()] = 0
    for value in created_at:
        day = ensure_utc(value).date()
        if day in buckets:
            buckets[day] += 1
    return [DailyCount(date=day.strftime(TREND_LABEL_FORMAT), count=count) for day, count in buckets.items()]


def average_per_day(trend: Sequence[DailyCount], days: int = TREND_DAYS) -> float:
    return round_half_up(sum(point.count for point in trend) / days, 1)


def planner_item(candidate: Candidate, now: datetime, default_action: str) -> PlannerItem:
    return PlannerItem(
        id=candidate.id,
        full_name=candidate.full_name,
        stage=candidate.stage,
        stage_color=color_of(candidate.stage),
        action=suggested_action(candidate.stage, default_action),
        position_name=candidate.position_name,
        client_name=candidate.client_name,
        days_since_update=days_between(now, candidate.updated_at),
    )


def build_day_planner(candidates: Sequence[Candidate], now: Optional[datetime] = None) -> DayPlanner:
    """
    Work out what needs attention today.

    ``candidates`` should be ordered most recently updated first; the lists
    keep that order.
    """
    now = ensure_utc(now or utc_now())
    urgent, follow_up = [], []
    updated_today = stale = active = success = 0

    for candidate in candidates:
        flags = categorize(candidate, now)
        if flags.urgent:
            urgent.append(planner_item(candidate, now, "Review"))
        if flags.follow_up:
            follow_up.append(planner_item(candidate, now, FOLLOW_UP_DEFAULT_ACTION))
        if is_same_day(candidate.updated_at, now):
            updated_today += 1
        stale += flags.stale
        active += flags.active
        success += flags.success

    groups = []
    for group in PIPELINE_GROUPS:
        if group.label == CLOSED_GROUP_LABEL:
            continue
        stages = []
        group_count = 0
        for stage in group.stages:
            in_stage = [c for c in candidates if c.stage == stage]
            if not in_stage:
                continue
            group_count += len(in_stage)
            stages.append(PlannerStage(
                stage=stage,
                count=len(in_stage),
                color=color_of(stage),
                candidates=[planner_item(c, now, "Review") for c in in_stage[:PLANNER_SAMPLE_SIZE]],
            ))
        if group_count:
            groups.append(PlannerGroup(
                label=group.label,
                emoji=group.emoji,
                color=group.color,
                count=group_count,
                percentage=percentage(group_count, len(candidates)),
                stages=stages,
            ))

    return DayPlanner(
        urgent=urgent,
        follow_up=follow_up,
        updated_today=updated_today,
        stale=stale,
        active=active,
        total=len(candidates),
        conversion_rate=percentage(success, len(candidates)),
        groups=groups,
    )


class StatsService:
    """Service for dashboard statistics."""

    def __init__(self, db: AsyncSession):
        self.repository = CandidateRepository(db)
        self.user_repository = UserRepository(db)

    async def overview(self, now: Optional[datetime] = None) -> OverviewStats:
        """Dashboard-wide totals for super admins. Weeks start on Sunday."""
        now = ensure_utc(now or utc_now())
        top = await self.repository.counts_by_creator(TOP_ADMINS)
        names = await self.user_repository.get_names([user_id for user_id, _ in top if user_id is not None])
        return OverviewStats(
            total_candidates=await self.repository.count(),
            total_admins=await self.user_repository.count_by_role(Roles.SUB_ADMIN),
            this_month=await self.repository.count(since=start_of_month(now)),
            this_week=await self.repository.count(since=start_of_week(now, SUNDAY)),
            stage_distribution=stage_distribution(await self.repository.stage_counts()),
            top_admins=[
                AdminCount(user_id=user_id, name=names.get(user_id, UNKNOWN_USER_NAME), count=count)
                for user_id, count in top
            ],
        )

    async def my_stats(self, user: User, now: Optional[datetime] = None) -> MyStats:
        """The caller's own numbers compared with the previous month and week."""
        now = ensure_utc(now or utc_now())
        month_start = start_of_month(now)
        week_start = start_of_week(now, SUNDAY)
        owner = user.id

        total = await self.repository.count(owner)
        this_month = await self.repository.count(owner, since=month_start)
        this_week = await self.repository.count(owner, since=week_start)
        total_before_month = await self.repository.count(owner, until=month_start)
        previous_month = await self.repository.count(
            owner, since=start_of_previous_month(now), until=month_start
        )
        previous_week = await self.repository.count(
            owner, since=week_start - timedelta(days=7), until=week_start
        )

        return MyStats(
            total=total,
            this_month=this_month,
            this_week=this_week,
            total_growth=calculate_growth(total, total_before_month),
            month_growth=calculate_growth(this_month, previous_month),
            week_growth=calculate_growth(this_week, previous_week),
            stage_distribution=stage_distribution(await self.repository.stage_counts(owner)),
        )

    async def admin_performance(self, user_id: UUID, now: Optional[datetime] = None) -> AdminPerformance:
        """Individual performance of one admin. Weeks start on Monday."""
        now = ensure_utc(now or utc_now())
        admin = await self.user_repository.get_by_id(user_id)
        if admin is None:
            raise AppError(status.HTTP_404_NOT_FOUND, "NOT_FOUND", "Admin not found")

        today = start_of_day(now)
        trend = daily_trend(
            await self.repository.created_at_since(today - timedelta(days=TREND_DAYS - 1), admin.id),
            now,
        )
        key_candidates = await self.repository.list_in_stages(KEY_STAGES, admin.id, KEY_STAGE_LIMIT)

        return AdminPerformance(
            user_id=admin.id,
            full_name=admin.full_name,
            email=admin.email,
            total=await self.repository.count(admin.id),
            this_month=await self.repository.count(admin.id, since=start_of_month(now)),
            this_week=await self.repository.count(admin.id, since=start_of_week(now, MONDAY)),
            today=await self.repository.count(admin.id, since=today),
            avg_per_day=average_per_day(trend),
            stage_data=stage_distribution(await self.repository.stage_counts(admin.id)),
            daily_trend=trend,
            key_stage_candidates=[
                KeyStageCandidate(
                    id=c.id,
                    full_name=c.full_name,
                    stage=c.stage,
                    stage_color=color_of(c.stage),
                    position_name=c.position_name,
                    client_name=c.client_name,
                    days_since_update=days_between(now, c.updated_at),
                )
                for c in key_candidates
            ],
        )

    async def day_planner(self, user: User, now: Optional[datetime] = None) -> DayPlanner:
        candidates = await self.repository.list_recently_updated(user.id)
        return build_day_planner(candidates, now)
