"""
Pipeline taxonomy router.

Read-only view of the stage groups and the per-stage rendering metadata.
"""

from typing import List

from fastapi import APIRouter

from app.core.pipeline_config import (
    ALL_STAGES,
    FOLLOW_UP_STAGES,
    LEGACY_STAGES,
    PIPELINE_GROUPS,
    STAGE_TO_GROUP,
    SUCCESS_STAGES,
    URGENT_STAGES,
    UnknownStageError,
    color_of,
    is_active,
    is_closed,
    is_known_stage,
    suggested_action,
    variant_of,
)
from app.schemas.pipeline import PipelineGroupRead, StageInfo

router = APIRouter(prefix="/pipeline", tags=["Pipeline"])


def describe_stage(stage: str) -> StageInfo:
    return StageInfo(
        name=stage,
        group=STAGE_TO_GROUP.get(stage),
        color=color_of(stage),
        variant=variant_of(stage),
        suggested_action=suggested_action(stage),
        is_active=is_active(stage),
        is_closed=is_closed(stage),
        is_urgent=stage in URGENT_STAGES,
        is_follow_up=stage in FOLLOW_UP_STAGES,
        is_success=stage in SUCCESS_STAGES,
    )


@router.get("/groups", response_model=List[PipelineGroupRead])
async def list_groups():
    """Stage groups in pipeline flow order."""
    return [
        PipelineGroupRead(label=g.label, emoji=g.emoji, color=g.color, stages=list(g.stages))
        for g in PIPELINE_GROUPS
    ]


@router.get("/stages", response_model=List[StageInfo])
async def list_stages():
    """Every selectable stage, then the legacy ones."""
    return [describe_stage(stage) for stage in ALL_STAGES + LEGACY_STAGES]


@router.get("/stages/{stage}", response_model=StageInfo)
async def get_stage(stage: str):
    if not is_known_stage(stage) and stage not in LEGACY_STAGES:
        raise UnknownStageError(stage)
    return describe_stage(stage)
