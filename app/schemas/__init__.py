"""
Schemas package.

Import all schemas here for easy access.
"""

from app.schemas.user import (
    SignUpRequest, AdminCreate, AdminRead, UserRead, LoginRequest, LoginResponse,
)
from app.schemas.candidate import (
    CandidateCreate, CandidateUpdate, CandidateRead, CandidateWriteResponse,
    StageChangeRequest, BulkDeleteRequest, BulkDeleteResponse,
)
from app.schemas.stage_history import StageHistoryRead
from app.schemas.pipeline import PipelineGroupRead, StageInfo

__all__ = [
    # User
    "SignUpRequest", "AdminCreate", "AdminRead", "UserRead", "LoginRequest", "LoginResponse",
    # Candidate
    "CandidateCreate", "CandidateUpdate", "CandidateRead", "CandidateWriteResponse",
    "StageChangeRequest", "BulkDeleteRequest", "BulkDeleteResponse",
    # StageHistory
    "StageHistoryRead",
    # Pipeline
    "PipelineGroupRead", "StageInfo",
]
