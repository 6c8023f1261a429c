"""
Candidate business logic service.

Visibility rule: super admins work on every candidate, sub admins only on
the candidates they created. A candidate outside the caller's scope is
reported as not found.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.permissions import check_can_view_all_candidates
from app.errors import AppError, DuplicateCandidateError
from app.models.candidate import Candidate
from app.models.stage_history import StageHistory
from app.models.user import User
from app.repositories.candidate_repository import CandidateRepository
from app.repositories.stage_history_repository import StageHistoryRepository
from app.repositories.user_repository import UserRepository
from app.schemas.candidate import CandidateCreate, CandidateRead, CandidateUpdate
from app.schemas.stage_history import StageHistoryRead

logger = logging.getLogger(__name__)

UNKNOWN_USER_NAME = "Unknown"


def owner_scope(user: User) -> Optional[UUID]:
    """The created_by filter applied to a user's candidate queries."""
    if check_can_view_all_candidates(user.role):
        return None
    return user.id


class CandidateService:
    """Service for candidate business logic."""

    def __init__(self, db: AsyncSession):
        self.repository = CandidateRepository(db)
        self.history_repository = StageHistoryRepository(db)
        self.user_repository = UserRepository(db)

    async def to_read(self, candidates: List[Candidate], include_creator: bool) -> List[CandidateRead]:
        """Serialize candidates, resolving the creator's name when asked."""
        names: Dict[UUID, str] = {}
        if include_creator:
            names = await self.user_repository.get_names(
                list({c.created_by for c in candidates if c.created_by is not None})
            )
        rows = []
        for candidate in candidates:
            row = CandidateRead.model_validate(candidate)
            if include_creator:
                row.added_by_name = names.get(candidate.created_by, UNKNOWN_USER_NAME)
            rows.append(row)
        return rows

    async def list_candidates(
        self,
        user: User,
        search: Optional[str] = None,
        stage: Optional[str] = None,
        created_by: Optional[UUID] = None,
        ids: Optional[List[UUID]] = None,
        limit: Optional[int] = 50,
        offset: int = 0,
    ) -> List[Candidate]:
        """List the candidates visible to a user."""
        owner_id = owner_scope(user)
        return await self.repository.list(
            owner_id=owner_id,
            search=search,
            stage=stage,
            created_by=created_by if owner_id is None else None,
            ids=ids,
            limit=limit,
            offset=offset,
        )

    async def get_candidate(self, user: User, candidate_id: UUID) -> Candidate:
        """Get a visible candidate or raise 404."""
        candidate = await self.repository.get_by_id(candidate_id, owner_scope(user))
        if candidate is None:
            raise AppError(status.HTTP_404_NOT_FOUND, "NOT_FOUND", "Candidate not found")
        return candidate

    async def check_duplicates(
        self,
        email: Optional[str],
        phone: Optional[str],
        resume_url: Optional[str],
        exclude_id: Optional[UUID] = None,
    ) -> List[str]:
        """
        Reject a duplicate email or phone; report a duplicate resume URL.

        Duplicates are checked across all candidates regardless of owner.

        Returns:
            Warning messages for non-blocking duplicates
        """
        warnings = []
        if resume_url:
            existing = await self.repository.find_by_resume_url(resume_url, exclude_id)
            if existing:
                warnings.append(
                    f"Resume already exists for candidate: {existing.full_name} ({existing.email})"
                )
                logger.warning("Duplicate resume URL %s (existing candidate %s)", resume_url, existing.id)

        existing = await self.repository.find_by_email(email, exclude_id)
        if existing:
            raise DuplicateCandidateError("email", existing.full_name, existing.email)

        existing = await self.repository.find_by_phone(phone, exclude_id)
        if existing:
            raise DuplicateCandidateError("phone", existing.full_name, existing.phone)

        return warnings

    async def create_candidate(self, user: User, data: CandidateCreate) -> Tuple[Candidate, List[str]]:
        """Create a candidate owned by the user."""
        warnings = await self.check_duplicates(data.email, data.phone, data.resume_url)
        candidate = await self.repository.create(data.model_dump(), created_by=user.id)
        logger.info("Candidate %s created by %s in stage %s", candidate.id, user.email, candidate.stage)
        return candidate, warnings

    async def update_candidate(
        self,
        user: User,
        candidate_id: UUID,
        data: CandidateUpdate,
    ) -> Tuple[Candidate, List[str]]:
        """
        Update a candidate. The owner never changes.

        A stage change appends a history entry carrying the candidate's
        comment as it stands after the update.
        """
        candidate = await self.get_candidate(user, candidate_id)
        values: Dict[str, Any] = data.model_dump(exclude_unset=True)

        warnings = await self.check_duplicates(
            values.get("email"),
            values.get("phone"),
            values.get("resume_url"),
            exclude_id=candidate.id,
        )

        old_stage = candidate.stage
        new_stage = values.get("stage", old_stage)
        candidate = await self.repository.update(candidate, values)

        if new_stage != old_stage:
            await self.history_repository.create(
                candidate_id=candidate.id,
                old_stage=old_stage,
                new_stage=new_stage,
                changed_by=user.id,
                comment=candidate.comment,
            )
            logger.info("Candidate %s moved %s -> %s by %s", candidate.id, old_stage, new_stage, user.email)

        return candidate, warnings

    async def change_stage(
        self,
        user: User,
        candidate_id: UUID,
        new_stage: str,
        comment: Optional[str] = None,
    ) -> Candidate:
        """
        Move a candidate to any stage.

        Moving to the current stage leaves the candidate untouched; if a
        comment is given it is still recorded in the history.
        """
        candidate = await self.get_candidate(user, candidate_id)
        old_stage = candidate.stage

        if new_stage == old_stage:
            if comment:
                await self.history_repository.create(
                    candidate_id=candidate.id,
                    old_stage=old_stage,
                    new_stage=new_stage,
                    changed_by=user.id,
                    comment=comment,
                )
                logger.info("Comment added to candidate %s by %s", candidate.id, user.email)
            return candidate

        candidate = await self.repository.update(candidate, {"stage": new_stage})
        await self.history_repository.create(
            candidate_id=candidate.id,
            old_stage=old_stage,
            new_stage=new_stage,
            changed_by=user.id,
            comment=comment,
        )
        logger.info("Candidate %s moved %s -> %s by %s", candidate.id, old_stage, new_stage, user.email)
        return candidate

    async def delete_candidate(self, user: User, candidate_id: UUID) -> None:
        candidate = await self.get_candidate(user, candidate_id)
        await self.repository.delete(candidate)
        logger.info("Candidate %s deleted by %s", candidate_id, user.email)

    async def bulk_delete(self, user: User, ids: List[UUID]) -> int:
        """Delete the visible candidates among ``ids``."""
        deleted = await self.repository.delete_many(list(set(ids)), owner_scope(user))
        logger.info("%d candidate(s) deleted in bulk by %s", deleted, user.email)
        return deleted

    async def get_history(self, user: User, candidate_id: UUID) -> List[StageHistoryRead]:
        """Latest history entries, newest first, with the changer's name."""
        candidate = await self.get_candidate(user, candidate_id)
        entries = await self.history_repository.list_for_candidate(
            candidate.id, limit=settings.HISTORY_PAGE_SIZE
        )
        names = await self.user_repository.get_names(
            list({e.changed_by for e in entries if e.changed_by is not None})
        )
        return [
            StageHistoryRead.model_validate(entry).model_copy(
                update={"changer_name": names.get(entry.changed_by, UNKNOWN_USER_NAME)}
            )
            for entry in entries
        ]

    async def delete_history_entry(self, user: User, candidate_id: UUID, history_id: UUID) -> None:
        candidate = await self.get_candidate(user, candidate_id)
        entry: Optional[StageHistory] = await self.history_repository.get_by_id(candidate.id, history_id)
        if entry is None:
            raise AppError(status.HTTP_404_NOT_FOUND, "NOT_FOUND", "History entry not found")
        await self.history_repository.delete(entry)
        logger.info("History entry %s of candidate %s deleted by %s", history_id, candidate_id, user.email)
