"""
StageHistory model.

Audit trail of pipeline stage changes and stage comments for a candidate.
"""

import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.utils.time import utc_now

if TYPE_CHECKING:
    from app.models.candidate import Candidate


class StageHistory(Base):
    """
    StageHistory table - one row per stage transition.

    Rows where old_stage == new_stage are comments added without moving the
    candidate.
    """

    __tablename__ = "stage_history"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("candidate.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    old_stage: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    new_stage: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    changed_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("user.id", ondelete="SET NULL"),
        nullable=True,
    )

    comment: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    # Relationships
    candidate: Mapped["Candidate"] = relationship(
        "Candidate",
        back_populates="stage_history",
    )
