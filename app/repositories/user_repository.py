"""
User repository - database operations for User.
"""

from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.candidate import Candidate
from app.models.user import User
from app.schemas.user import AccountCreate
from app.core.security import hash_password


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (case-insensitive email)."""
        if not email or not email.strip():
            return None
        email_clean = email.strip().lower()
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email_clean)
        )
        return result.scalar_one_or_none()

    async def create(self, data: AccountCreate, role: Optional[str] = None) -> User:
        """Create a new user."""
        user = User(
            email=data.email.strip().lower(),
            full_name=data.full_name,
            hashed_password=hash_password(data.password),
            role=role,
        )
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def list_by_role(self, role: str) -> List[User]:
        """Users holding a role, newest first."""
        result = await self.db.execute(
            select(User)
            .where(User.role == role)
            .order_by(User.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_by_role(self, role: str) -> int:
        result = await self.db.execute(
            select(func.count(User.id)).where(User.role == role)
        )
        return result.scalar_one()

    async def set_role(self, user: User, role: Optional[str]) -> User:
        """Grant or revoke a dashboard role."""
        user.role = role
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def get_names(self, user_ids: List[UUID]) -> Dict[UUID, str]:
        """Map user ids to full names for display."""
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(User.id, User.full_name).where(User.id.in_(user_ids))
        )
        return {row.id: row.full_name for row in result.all()}

    async def candidate_counts(self, user_ids: List[UUID]) -> Dict[UUID, int]:
        """Number of candidates each user added."""
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(Candidate.created_by, func.count(Candidate.id))
            .where(Candidate.created_by.in_(user_ids))
            .group_by(Candidate.created_by)
        )
        return {created_by: count for created_by, count in result.all()}
