"""
FastAPI dependencies for the application.
"""

from uuid import UUID
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.core.jwt import decode_access_token
from app.core.permissions import Roles, check_has_dashboard_access, raise_if_not_roles
from app.models.user import User
from app.repositories.user_repository import UserRepository

# Security scheme for JWT bearer tokens
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get the current authenticated user from JWT token.

    Validates the JWT token, loads the user from database,
    and ensures the user is active.

    Raises:
        401: If token is missing/invalid or user not found
        403: If user is not active
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id_str = payload.get("user_id")
    try:
        user_id = UUID(str(user_id_str))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_repository = UserRepository(db)
    user = await user_repository.get_by_id(user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    return user


async def require_dashboard_user(user: User = Depends(get_current_user)) -> User:
    """
    Require a user with a dashboard role.

    The role is read from the database on every request, so revoking a
    sub admin takes effect immediately even while their token is valid.
    """
    if not check_has_dashboard_access(user.role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account has no dashboard role yet. Ask a super admin for access."
        )
    return user


def require_role(*allowed_roles: str):
    """
    Dependency factory to require specific roles.

    Usage:
        @router.post("/", dependencies=[Depends(require_role("super_admin"))])
        async def create_something(...):
            ...
    """
    async def check_role(user: User = Depends(require_dashboard_user)) -> User:
        raise_if_not_roles(user.role, list(allowed_roles))
        return user

    return check_role


require_super_admin = require_role(Roles.SUPER_ADMIN)
