"""
Authentication service for sign-up, login and token management.
"""

import logging
from typing import Optional

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.jwt import create_access_token
from app.core.permissions import Roles
from app.core.security import verify_password
from app.errors import AppError
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user import AccountCreate, LoginRequest, LoginResponse, SignUpRequest, UserRead

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.user_repository = UserRepository(db)

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate a user by email and password.

        Args:
            email: User email
            password: Plain text password

        Returns:
            User object if authentication successful, None otherwise
        """
        user = await self.user_repository.get_by_email(email)

        if not user:
            return None

        if not user.is_active:
            return None

        if not verify_password(password, user.hashed_password):
            return None

        return user

    def create_token_for_user(self, user: User) -> str:
        """Create a JWT access token for a user."""
        token_data = {
            "user_id": str(user.id),
            "email": user.email,
            "role": user.role,
        }
        return create_access_token(token_data)

    async def login(self, credentials: LoginRequest) -> Optional[LoginResponse]:
        """
        Perform user login.

        Returns:
            LoginResponse with token and user info, or None if authentication failed
        """
        user = await self.authenticate_user(credentials.email, credentials.password)
        if not user:
            logger.info("Failed login for %s", credentials.email)
            return None

        return LoginResponse(
            access_token=self.create_token_for_user(user),
            token_type="bearer",
            user=UserRead.model_validate(user),
        )

    async def register_account(self, data: AccountCreate, role: Optional[str] = None) -> User:
        """Create an account, refusing emails that are already registered."""
        existing = await self.user_repository.get_by_email(data.email)
        if existing:
            raise AppError(
                status.HTTP_409_CONFLICT,
                "EMAIL_TAKEN",
                "An account with this email already exists",
                {"email": data.email},
            )
        return await self.user_repository.create(data, role=role)

    async def signup(self, data: SignUpRequest) -> User:
        """Public sign-up. The new account has no role until a super admin grants one."""
        if not settings.ALLOW_SIGNUP:
            raise AppError(status.HTTP_403_FORBIDDEN, "SIGNUP_DISABLED", "Sign-up is disabled")
        user = await self.register_account(data)
        logger.info("New account signed up: %s", user.email)
        return user

    async def ensure_super_admin(self, email: str, password: str, full_name: str) -> User:
        """Create the configured super admin, or restore the role on an existing account."""
        user = await self.user_repository.get_by_email(email)
        if user is None:
            data = AccountCreate(email=email, password=password, full_name=full_name)
            user = await self.user_repository.create(data, role=Roles.SUPER_ADMIN)
            logger.info("Created super admin %s", user.email)
        elif user.role != Roles.SUPER_ADMIN:
            user = await self.user_repository.set_role(user, Roles.SUPER_ADMIN)
            logger.info("Granted super admin role to %s", user.email)
        return user
