"""
ORM models for the dashboard.

Importing this package registers every table on ``Base.metadata``.
"""

from app.models.user import User
from app.models.candidate import Candidate
from app.models.stage_history import StageHistory

__all__ = ["User", "Candidate", "StageHistory"]
