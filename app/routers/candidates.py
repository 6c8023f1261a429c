"""
Candidate router - API endpoints for candidates, their stage and history.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_db, require_dashboard_user
from app.core.permissions import check_can_view_all_candidates
from app.models.user import User
from app.schemas.candidate import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    CandidateCreate,
    CandidateRead,
    CandidateUpdate,
    CandidateWriteResponse,
    StageChangeRequest,
)
from app.schemas.stage_history import StageHistoryRead
from app.services.candidate_service import CandidateService
from app.services.candidate_transfer_service import CandidateTransferService, export_filename

router = APIRouter(prefix="/candidates", tags=["candidates"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("", response_model=List[CandidateRead])
async def list_candidates(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
    limit: int = Query(50, ge=1, le=settings.CANDIDATE_PAGE_MAX),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    stage: Optional[str] = None,
    created_by: Optional[UUID] = None,
):
    """
    List candidates with pagination and filters, newest first.

    Filters: search (name, email, phone, city, position, client), stage,
    created_by (super admins only).
    """
    service = CandidateService(db)
    candidates = await service.list_candidates(
        current_user,
        search=search,
        stage=stage,
        created_by=created_by,
        limit=limit,
        offset=offset,
    )
    return await service.to_read(candidates, check_can_view_all_candidates(current_user.role))


@router.post("", response_model=CandidateWriteResponse, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    data: CandidateCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    """Create a new candidate owned by the caller."""
    service = CandidateService(db)
    candidate, warnings = await service.create_candidate(current_user, data)
    rows = await service.to_read([candidate], check_can_view_all_candidates(current_user.role))
    return CandidateWriteResponse(candidate=rows[0], warnings=warnings)


@router.get("/export")
async def export_candidates(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
    search: Optional[str] = None,
    stage: Optional[str] = None,
    created_by: Optional[UUID] = None,
    ids: Optional[List[UUID]] = Query(None),
):
    """Download the filtered candidates (or just ``ids``) as an Excel file."""
    include_creator = check_can_view_all_candidates(current_user.role)
    candidates = await CandidateService(db).list_candidates(
        current_user,
        search=search,
        stage=stage,
        created_by=created_by,
        ids=ids,
        limit=None,
    )
    content = await CandidateTransferService(db).export_candidates(candidates, include_creator)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.post("/import", status_code=status.HTTP_201_CREATED)
async def import_candidates(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    """Import an Excel file; every row must be valid or nothing is saved."""
    content = await file.read()
    created = await CandidateTransferService(db).import_candidates(current_user, content)
    return {"imported": len(created)}


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_candidates(
    data: BulkDeleteRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    deleted = await CandidateService(db).bulk_delete(current_user, data.ids)
    return BulkDeleteResponse(deleted=deleted)


@router.get("/{candidate_id}", response_model=CandidateRead)
async def get_candidate(
    candidate_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    """Get a candidate by ID."""
    service = CandidateService(db)
    candidate = await service.get_candidate(current_user, candidate_id)
    rows = await service.to_read([candidate], check_can_view_all_candidates(current_user.role))
    return rows[0]


@router.put("/{candidate_id}", response_model=CandidateWriteResponse)
async def update_candidate(
    candidate_id: UUID,
    data: CandidateUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    """Update a candidate. A stage change is recorded in its history."""
    service = CandidateService(db)
    candidate, warnings = await service.update_candidate(current_user, candidate_id, data)
    rows = await service.to_read([candidate], check_can_view_all_candidates(current_user.role))
    return CandidateWriteResponse(candidate=rows[0], warnings=warnings)


@router.delete("/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_candidate(
    candidate_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    await CandidateService(db).delete_candidate(current_user, candidate_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{candidate_id}/stage", response_model=CandidateRead)
async def change_stage(
    candidate_id: UUID,
    data: StageChangeRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    """
    Move a candidate to another stage.

    Any stage can follow any other. Sending the current stage with a comment
    records the comment without moving the candidate.
    """
    service = CandidateService(db)
    candidate = await service.change_stage(current_user, candidate_id, data.new_stage, data.comment)
    rows = await service.to_read([candidate], check_can_view_all_candidates(current_user.role))
    return rows[0]


@router.get("/{candidate_id}/history", response_model=List[StageHistoryRead])
async def get_history(
    candidate_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    """Latest stage history entries, newest first."""
    return await CandidateService(db).get_history(current_user, candidate_id)


@router.delete("/{candidate_id}/history/{history_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_history_entry(
    candidate_id: UUID,
    history_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_dashboard_user),
):
    await CandidateService(db).delete_history_entry(current_user, candidate_id, history_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
