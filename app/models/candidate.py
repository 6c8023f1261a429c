"""
Candidate model.

Represents a job candidate moving through the recruitment pipeline.
"""

import uuid
from datetime import date
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import String, Text, Date, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.pipeline_config import DEFAULT_STAGE
from app.models.base_model import TimestampedModel

if TYPE_CHECKING:
    from app.models.stage_history import StageHistory


class Candidate(TimestampedModel):
    """
    Candidate table - represents a job seeker being tracked by an admin.

    Contains their contact info, current employment, compensation,
    the client/position they are submitted for, and the pipeline stage.
    """

    __tablename__ = "candidate"

    full_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Contact information
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    phone: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
    )

    gender: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )

    city: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Current employment
    designation: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    company: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    experience: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    qualification: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    industry: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    # Compensation and availability, kept as entered (e.g. "12 LPA", "30 days")
    current_ctc: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    expected_ctc: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    notice_period: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    # Submission details
    position_name: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    client_name: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    date_of_sharing: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )

    resume_url: Mapped[Optional[str]] = mapped_column(
        String(1000),
        nullable=True,
    )

    comment: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    # Pipeline stage label (see app.core.pipeline_config)
    stage: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DEFAULT_STAGE,
        index=True,
    )

    # Admin who added the candidate
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    stage_history: Mapped[List["StageHistory"]] = relationship(
        "StageHistory",
        back_populates="candidate",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
