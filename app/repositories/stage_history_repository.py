"""
StageHistory repository - database operations for StageHistory.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.stage_history import StageHistory


class StageHistoryRepository:
    """Repository for StageHistory database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        candidate_id: UUID,
        old_stage: Optional[str],
        new_stage: str,
        changed_by: Optional[UUID],
        comment: Optional[str] = None,
    ) -> StageHistory:
        """Append a history entry."""
        entry = StageHistory(
            candidate_id=candidate_id,
            old_stage=old_stage,
            new_stage=new_stage,
            changed_by=changed_by,
            comment=comment,
        )
        self.db.add(entry)
        await self.db.flush()
        await self.db.refresh(entry)
        return entry

    async def list_for_candidate(self, candidate_id: UUID, limit: int = 20) -> List[StageHistory]:
        """Latest entries for a candidate, newest first."""
        result = await self.db.execute(
            select(StageHistory)
            .where(StageHistory.candidate_id == candidate_id)
            .order_by(StageHistory.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_id(self, candidate_id: UUID, history_id: UUID) -> Optional[StageHistory]:
        result = await self.db.execute(
            select(StageHistory).where(
                StageHistory.id == history_id,
                StageHistory.candidate_id == candidate_id,
            )
        )
        return result.scalar_one_or_none()

    async def delete(self, entry: StageHistory) -> None:
        await self.db.delete(entry)
        await self.db.flush()
