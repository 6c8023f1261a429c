"""
Admin management service.

Super admins create sub admin accounts and revoke their access. Revoking
keeps the account and every candidate it added.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.permissions import Roles
from app.errors import AppError
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user import AdminCreate, AdminRead
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)


class AdminService:
    """Service for sub admin management."""

    def __init__(self, db: AsyncSession):
        self.repository = UserRepository(db)
        self.auth_service = AuthService(db)

    async def list_admins(self) -> List[AdminRead]:
        """Sub admins, newest first, with how many candidates each added."""
        admins = await self.repository.list_by_role(Roles.SUB_ADMIN)
        counts = await self.repository.candidate_counts([admin.id for admin in admins])
        return [
            AdminRead.model_validate(admin).model_copy(update={"candidate_count": counts.get(admin.id, 0)})
            for admin in admins
        ]

    async def create_admin(self, data: AdminCreate, created_by: User) -> User:
        user = await self.auth_service.register_account(data, role=Roles.SUB_ADMIN)
        logger.info("Sub admin %s created by %s", user.email, created_by.email)
        return user

    async def revoke_admin(self, user_id: UUID, revoked_by: User) -> None:
        user = await self.repository.get_by_id(user_id)
        if user is None or user.role != Roles.SUB_ADMIN:
            raise AppError(status.HTTP_404_NOT_FOUND, "NOT_FOUND", "Sub admin not found")
        await self.repository.set_role(user, None)
        logger.info("Sub admin role revoked from %s by %s", user.email, revoked_by.email)
