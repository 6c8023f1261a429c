"""
User model for authentication and authorization.
"""

from typing import Optional

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import TimestampedModel


class User(TimestampedModel):
    """
    User table - represents dashboard accounts.

    The role decides what the user may see: "super_admin" manages everything,
    "sub_admin" works on their own candidates, and a user without a role can
    sign in but is kept out of the dashboard.
    """

    __tablename__ = "user"

    # Stored lowercased; unique across the whole dashboard
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    role: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
