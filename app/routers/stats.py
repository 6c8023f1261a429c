"""
Statistics and day planner router.
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, require_dashboard_user, require_super_admin
from app.models.user import User
from app.schemas.stats import AdminPerformance, DayPlanner, MyStats, OverviewStats
from app.services.stats_service import StatsService

router = APIRouter(prefix="/stats", tags=["Statistics"])


@router.get("/overview", response_model=OverviewStats)
async def overview(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_super_admin),
):
    return await StatsService(db).overview()


@router.get("/me", response_model=MyStats)
async def my_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    """The caller's own totals with growth percentages."""
    return await StatsService(db).my_stats(current_user)


@router.get("/admins/{user_id}", response_model=AdminPerformance)
async def admin_performance(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_super_admin),
):
    return await StatsService(db).admin_performance(user_id)


@router.get("/day-planner", response_model=DayPlanner)
async def day_planner(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    """What the caller should work on today."""
    return await StatsService(db).day_planner(current_user)
