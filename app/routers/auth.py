"""
Authentication router for sign-up, login and the current user.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, get_current_user
from app.schemas.user import LoginRequest, LoginResponse, SignUpRequest, UserRead
from app.services.auth_service import AuthService
from app.models.user import User

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignUpRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Create an account.

    New accounts have no role; a super admin has to grant one before the
    dashboard opens for them.
    """
    return await AuthService(db).signup(data)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate user and return JWT access token."""
    result = await AuthService(db).login(credentials)

    if not result:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return result


@router.get("/me", response_model=UserRead)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
):
    """Get information about the currently authenticated user."""
    return current_user
