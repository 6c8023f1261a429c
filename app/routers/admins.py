"""
Admin management router (super admins only).
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, require_super_admin
from app.models.user import User
from app.schemas.user import AdminCreate, AdminRead, UserRead
from app.services.admin_service import AdminService

router = APIRouter(prefix="/admins", tags=["Admins"])


@router.get("", response_model=List[AdminRead])
async def list_admins(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_super_admin),
):
    """List sub admins, newest first, with their candidate counts."""
    return await AdminService(db).list_admins()


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_admin(
    data: AdminCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_super_admin),
):
    return await AdminService(db).create_admin(data, current_user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_admin(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_super_admin),
):
    """Revoke the sub admin role. The account and its candidates stay."""
    await AdminService(db).revoke_admin(user_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
