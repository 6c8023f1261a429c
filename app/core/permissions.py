"""
Role-based permission helpers for the recruitment dashboard.

Defines roles and the checks the routers and services rely on.
"""

from typing import List, Optional
from fastapi import HTTPException, status


class Roles:
    """Dashboard roles."""
    SUPER_ADMIN = "super_admin"
    SUB_ADMIN = "sub_admin"

    # All roles list for validation
    ALL = [SUPER_ADMIN, SUB_ADMIN]

    # Role capabilities matrix
    # super_admin: every candidate, admin management, global statistics
    # sub_admin: only candidates they created, their own statistics and day planner
    # (no role): may sign in, cannot open the dashboard


def check_role_permission(user_role: Optional[str], allowed_roles: List[str]) -> bool:
    """
    Check if user's role is in the list of allowed roles.

    Args:
        user_role: The user's current role
        allowed_roles: List of roles that are permitted

    Returns:
        True if user has permission, False otherwise
    """
    if not user_role or not allowed_roles:
        return False
    return user_role in allowed_roles


def check_is_super_admin(user_role: Optional[str]) -> bool:
    """Check if user is a super admin."""
    return user_role == Roles.SUPER_ADMIN


def check_has_dashboard_access(user_role: Optional[str]) -> bool:
    """Check if user may open the dashboard at all."""
    return check_role_permission(user_role, Roles.ALL)


def check_can_view_all_candidates(user_role: Optional[str]) -> bool:
    """Super admins see every candidate; sub admins only their own."""
    return check_is_super_admin(user_role)


def raise_if_not_roles(user_role: Optional[str], allowed_roles: List[str], action: str = "perform this action") -> None:
    """
    Raise 403 error if user doesn't have one of the allowed roles.

    Args:
        user_role: User's role
        allowed_roles: List of permitted roles
        action: Description of action being blocked

    Raises:
        HTTPException: 403 if user doesn't have permission
    """
    if not check_role_permission(user_role, allowed_roles):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Insufficient permissions to {action}. Required: {', '.join(allowed_roles)}"
        )
