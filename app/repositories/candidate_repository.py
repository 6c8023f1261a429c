"""
Candidate repository - database operations for Candidate.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.candidate import Candidate
from app.models.stage_history import StageHistory

# Columns matched by the free-text search
SEARCH_COLUMNS = (
    Candidate.full_name,
    Candidate.email,
    Candidate.phone,
    Candidate.city,
    Candidate.position_name,
    Candidate.client_name,
)


def escape_like(term: str) -> str:
    """Make a search term match literally inside a LIKE pattern."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CandidateRepository:
    """
    Repository for Candidate database operations.

    Every read takes an optional ``owner_id``: when set, only candidates
    created by that user are visible.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _scoped(query, owner_id: Optional[UUID]):
        if owner_id is not None:
            query = query.where(Candidate.created_by == owner_id)
        return query

    async def list(
        self,
        owner_id: Optional[UUID] = None,
        search: Optional[str] = None,
        stage: Optional[str] = None,
        created_by: Optional[UUID] = None,
        ids: Optional[List[UUID]] = None,
        limit: Optional[int] = 50,
        offset: int = 0,
    ) -> List[Candidate]:
        """List candidates with filters, newest first."""
        query = self._scoped(select(Candidate), owner_id)

        if search:
            pattern = f"%{escape_like(search.strip())}%"
            query = query.where(
                or_(*(column.ilike(pattern, escape="\\") for column in SEARCH_COLUMNS))
            )
        if stage is not None:
            query = query.where(Candidate.stage == stage)
        if created_by is not None:
            query = query.where(Candidate.created_by == created_by)
        if ids:
            query = query.where(Candidate.id.in_(ids))

        query = query.order_by(Candidate.created_at.desc()).offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, candidate_id: UUID, owner_id: Optional[UUID] = None) -> Optional[Candidate]:
        """Get a candidate by ID if visible to the owner."""
        result = await self.db.execute(
            self._scoped(select(Candidate).where(Candidate.id == candidate_id), owner_id)
        )
        return result.scalar_one_or_none()

    async def _find_other(self, column, value: Optional[str], exclude_id: Optional[UUID]) -> Optional[Candidate]:
        if not value:
            return None
        query = select(Candidate).where(func.lower(column) == value.strip().lower())
        if exclude_id is not None:
            query = query.where(Candidate.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalars().first()

    async def find_by_email(self, email: Optional[str], exclude_id: Optional[UUID] = None) -> Optional[Candidate]:
        """Another candidate with this email, across all owners."""
        return await self._find_other(Candidate.email, email, exclude_id)

    async def find_by_phone(self, phone: Optional[str], exclude_id: Optional[UUID] = None) -> Optional[Candidate]:
        return await self._find_other(Candidate.phone, phone, exclude_id)

    async def find_by_resume_url(self, resume_url: Optional[str], exclude_id: Optional[UUID] = None) -> Optional[Candidate]:
        return await self._find_other(Candidate.resume_url, resume_url, exclude_id)

    async def create(self, values: Dict[str, Any], created_by: Optional[UUID]) -> Candidate:
        """Create a new candidate."""
        candidate = Candidate(created_by=created_by, **values)
        self.db.add(candidate)
        await self.db.flush()
        await self.db.refresh(candidate)
        return candidate

    async def create_many(self, rows: Iterable[Dict[str, Any]], created_by: Optional[UUID]) -> List[Candidate]:
        candidates = [Candidate(created_by=created_by, **values) for values in rows]
        self.db.add_all(candidates)
        await self.db.flush()
        return candidates

    async def update(self, candidate: Candidate, values: Dict[str, Any]) -> Candidate:
        """Apply changed fields to a candidate."""
        for field, value in values.items():
            setattr(candidate, field, value)
        await self.db.flush()
        await self.db.refresh(candidate)
        return candidate

    async def delete(self, candidate: Candidate) -> None:
        """Delete a candidate and its stage history."""
        await self.db.execute(
            delete(StageHistory).where(StageHistory.candidate_id == candidate.id)
        )
        await self.db.delete(candidate)
        await self.db.flush()

    async def delete_many(self, ids: List[UUID], owner_id: Optional[UUID] = None) -> int:
        """Delete the visible candidates among ``ids``; returns how many went."""
        result = await self.db.execute(
            self._scoped(select(Candidate.id).where(Candidate.id.in_(ids)), owner_id)
        )
        visible = list(result.scalars().all())
        if not visible:
            return 0
        await self.db.execute(
            delete(StageHistory).where(StageHistory.candidate_id.in_(visible))
        )
        await self.db.execute(
            delete(Candidate).where(Candidate.id.in_(visible)).execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return len(visible)

    # Aggregates used by the statistics views

    async def count(
        self,
        owner_id: Optional[UUID] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> int:
        """Count candidates created in ``[since, until)``."""
        query = self._scoped(select(func.count(Candidate.id)), owner_id)
        if since is not None:
            query = query.where(Candidate.created_at >= since)
        if until is not None:
            query = query.where(Candidate.created_at < until)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def stage_counts(self, owner_id: Optional[UUID] = None) -> List[Tuple[str, int]]:
        """(stage, count) pairs, largest first."""
        count_col = func.count(Candidate.id)
        query = self._scoped(select(Candidate.stage, count_col), owner_id)
        result = await self.db.execute(
            query.group_by(Candidate.stage).order_by(count_col.desc(), Candidate.stage.asc())
        )
        return [(stage, count) for stage, count in result.all()]

    async def counts_by_creator(self, limit: int = 5) -> List[Tuple[Optional[UUID], int]]:
        """(created_by, count) pairs for the most productive admins."""
        count_col = func.count(Candidate.id)
        result = await self.db.execute(
            select(Candidate.created_by, count_col)
            .group_by(Candidate.created_by)
            .order_by(count_col.desc())
            .limit(limit)
        )
        return [(created_by, count) for created_by, count in result.all()]

    async def created_at_since(self, since: datetime, owner_id: Optional[UUID] = None) -> List[datetime]:
        result = await self.db.execute(
            self._scoped(select(Candidate.created_at), owner_id).where(Candidate.created_at >= since)
        )
        return list(result.scalars().all())

    async def list_in_stages(
        self,
        stages: Iterable[str],
        owner_id: Optional[UUID] = None,
        limit: int = 15,
    ) -> List[Candidate]:
        """Most recently updated candidates in the given stages."""
        result = await self.db.execute(
            self._scoped(select(Candidate), owner_id)
            .where(Candidate.stage.in_(list(stages)))
            .order_by(Candidate.updated_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_recently_updated(self, owner_id: Optional[UUID] = None) -> List[Candidate]:
        """All visible candidates, most recently updated first."""
        result = await self.db.execute(
            self._scoped(select(Candidate), owner_id).order_by(Candidate.updated_at.desc())
        )
        return list(result.scalars().all())
