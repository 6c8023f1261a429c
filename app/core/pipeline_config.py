"""
Recruitment pipeline configuration.

Single source of truth for the stage vocabulary, its grouping into phases,
display metadata (colors, badge variants, suggested actions) and the derived
categorizations used by the candidate views, statistics and day planner.

Flow: Screening -> Interview -> Documentation -> Offer -> Joining -> Closed / Dropouts

Everything here is built once at import time and exposed read-only
(tuples, frozensets and MappingProxyType).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.utils.time import ensure_utc, utc_now


class UnknownStageError(LookupError):
    """Raised when a stage string is not part of any pipeline group."""

    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"Unknown pipeline stage: {stage!r}")


@dataclass(frozen=True)
class PipelineGroup:
    """An ordered phase of the hiring funnel."""

    label: str
    emoji: str
    color: str
    stages: Tuple[str, ...]


# Pipeline groups in flow order
PIPELINE_GROUPS: Tuple[PipelineGroup, ...] = (
    PipelineGroup(
        label="Screening",
        emoji="🟦",
        color="hsl(200, 70%, 50%)",
        stages=("Screening", "CV On Hold", "CV Shared", "CV Not Relevant", "Duplicate", "Not Interested"),
    ),
    PipelineGroup(
        label="Interview",
        emoji="🟨",
        color="hsl(45, 80%, 50%)",
        stages=(
            "Interview Scheduled", "Interview", "Round 1", "Round 2", "Round 3",
            "Selected", "Rejected", "Backout", "On Hold",
        ),
    ),
    PipelineGroup(
        label="Documentation",
        emoji="🟧",
        color="hsl(25, 85%, 55%)",
        stages=("Documents Requested", "Documents Shared", "Documents Verified"),
    ),
    PipelineGroup(
        label="Offer",
        emoji="🟩",
        color="hsl(140, 60%, 45%)",
        stages=(
            "Offer Discussion", "Offer Pending Approval", "Offer Pending", "Offer Released",
            "Offer", "Offer Accepted", "Offer Rejected",
        ),
    ),
    PipelineGroup(
        label="Joining",
        emoji="🟪",
        color="hsl(270, 60%, 55%)",
        stages=("Joining Pending", "Joined"),
    ),
    PipelineGroup(
        label="Closed / Dropouts",
        emoji="⛔",
        color="hsl(0, 50%, 50%)",
        stages=("Rejected", "Backout", "Not Interested"),
    ),
)

CLOSED_GROUP_LABEL = "Closed / Dropouts"
DEFAULT_STAGE = "Screening"

# Stages that render but belong to no group (older records)
LEGACY_STAGES: Tuple[str, ...] = ("Hired",)

DEFAULT_STAGE_COLOR = "hsl(var(--muted-foreground))"
DEFAULT_STAGE_VARIANT = "bg-muted text-muted-foreground border-muted"
DEFAULT_ACTION = "Review"

STALE_AFTER = timedelta(days=7)


def _flatten_stages(groups: Tuple[PipelineGroup, ...]) -> Tuple[str, ...]:
    seen = set()
    result: List[str] = []
    for group in groups:
        for stage in group.stages:
            if stage not in seen:
                seen.add(stage)
                result.append(stage)
    return tuple(result)


def _first_owner_map(groups: Tuple[PipelineGroup, ...]) -> Dict[str, str]:
    owners: Dict[str, str] = {}
    for group in groups:
        for stage in group.stages:
            # first group wins; later listings (e.g. Rejected under Closed) are ignored
            owners.setdefault(stage, group.label)
    return owners


# Flat list of ALL stages in pipeline order (unique)
ALL_STAGES: Tuple[str, ...] = _flatten_stages(PIPELINE_GROUPS)

# Stage to parent group mapping (first occurrence wins)
STAGE_TO_GROUP: Mapping[str, str] = MappingProxyType(_first_owner_map(PIPELINE_GROUPS))

# Color mapping for each individual stage
STAGE_COLORS: Mapping[str, str] = MappingProxyType({
    # Screening group
    "Screening": "hsl(200, 70%, 50%)",
    "CV On Hold": "hsl(200, 50%, 60%)",
    "CV Shared": "hsl(174, 72%, 46%)",
    "CV Not Relevant": "hsl(0, 30%, 60%)",
    "Duplicate": "hsl(0, 0%, 55%)",
    "Not Interested": "hsl(0, 0%, 55%)",

    # Interview group
    "Interview Scheduled": "hsl(45, 80%, 50%)",
    "Interview": "hsl(280, 60%, 55%)",
    "Round 1": "hsl(45, 93%, 47%)",
    "Round 2": "hsl(120, 60%, 50%)",
    "Round 3": "hsl(180, 60%, 45%)",
    "Selected": "hsl(142, 70%, 45%)",
    "Rejected": "hsl(0, 70%, 50%)",
    "Backout": "hsl(30, 80%, 50%)",
    "On Hold": "hsl(45, 80%, 50%)",

    # Documentation group
    "Documents Requested": "hsl(25, 75%, 55%)",
    "Documents Shared": "hsl(25, 85%, 50%)",
    "Documents Verified": "hsl(25, 90%, 45%)",

    # Offer group
    "Offer Discussion": "hsl(140, 50%, 50%)",
    "Offer Pending Approval": "hsl(25, 95%, 53%)",
    "Offer Pending": "hsl(25, 95%, 53%)",
    "Offer Released": "hsl(140, 55%, 45%)",
    "Offer": "hsl(140, 60%, 45%)",
    "Offer Accepted": "hsl(142, 70%, 40%)",
    "Offer Rejected": "hsl(0, 60%, 50%)",

    # Joining group
    "Joining Pending": "hsl(270, 50%, 55%)",
    "Joined": "hsl(150, 70%, 40%)",

    # Legacy
    "Hired": "hsl(160, 70%, 40%)",
})

# Badge variant classes for each stage
STAGE_VARIANTS: Mapping[str, str] = MappingProxyType({
    # Screening group
    "Screening": "bg-blue-500/10 text-blue-600 border-blue-500",
    "CV On Hold": "bg-blue-400/10 text-blue-500 border-blue-400",
    "CV Shared": "bg-teal-500/10 text-teal-600 border-teal-500",
    "CV Not Relevant": "bg-red-300/10 text-red-400 border-red-300",
    "Duplicate": DEFAULT_STAGE_VARIANT,
    "Not Interested": DEFAULT_STAGE_VARIANT,

    # Interview group
    "Interview Scheduled": "bg-yellow-500/10 text-yellow-600 border-yellow-500",
    "Interview": "bg-purple-500/10 text-purple-600 border-purple-500",
    "Round 1": "bg-yellow-500/10 text-yellow-600 border-yellow-500",
    "Round 2": "bg-green-500/10 text-green-600 border-green-500",
    "Round 3": "bg-teal-500/10 text-teal-600 border-teal-500",
    "Selected": "bg-emerald-500/10 text-emerald-600 border-emerald-500",
    "Rejected": "bg-red-500/10 text-red-600 border-red-500",
    "Backout": "bg-orange-500/10 text-orange-600 border-orange-500",
    "On Hold": "bg-amber-500/10 text-amber-600 border-amber-500",

    # Documentation group
    "Documents Requested": "bg-orange-400/10 text-orange-500 border-orange-400",
    "Documents Shared": "bg-orange-500/10 text-orange-600 border-orange-500",
    "Documents Verified": "bg-orange-600/10 text-orange-700 border-orange-600",

    # Offer group
    "Offer Discussion": "bg-green-500/10 text-green-600 border-green-500",
    "Offer Pending Approval": "bg-amber-500/10 text-amber-600 border-amber-500",
    "Offer Pending": "bg-amber-500/10 text-amber-600 border-amber-500",
    "Offer Released": "bg-green-600/10 text-green-700 border-green-600",
    "Offer": "bg-green-500/10 text-green-600 border-green-500",
    "Offer Accepted": "bg-emerald-600/10 text-emerald-700 border-emerald-600",
    "Offer Rejected": "bg-red-500/10 text-red-600 border-red-500",

    # Joining group
    "Joining Pending": "bg-purple-500/10 text-purple-600 border-purple-500",
    "Joined": "bg-emerald-600/10 text-emerald-700 border-emerald-600",

    # Legacy
    "Hired": "bg-emerald-500/10 text-emerald-600 border-emerald-500",
})

# Terminal/closed stages
CLOSED_STAGES = frozenset({
    "Hired", "Joined", "Rejected", "Backout", "Not Interested",
    "Duplicate", "CV Not Relevant", "Offer Rejected",
})

# Stages considered "active pipeline": everything in the vocabulary that is not closed
ACTIVE_PIPELINE_STAGES: Tuple[str, ...] = tuple(s for s in ALL_STAGES if s not in CLOSED_STAGES)

# Stages that need urgent attention
URGENT_STAGES = frozenset({
    "Interview Scheduled", "Interview", "Round 1", "Round 2", "Round 3",
    "Offer Pending", "Offer Pending Approval", "Offer Discussion", "Offer",
})

# Stages that need follow-up
FOLLOW_UP_STAGES = frozenset({
    "CV Shared", "Screening", "On Hold", "Documents Requested", "CV On Hold", "Joining Pending",
})

# Success stages for conversion rate
SUCCESS_STAGES = frozenset({"Hired", "Joined", "Offer Accepted"})

# Stages highlighted on the individual admin performance view
KEY_STAGES: Tuple[str, ...] = ("Interview", "Round 1", "Round 2", "Round 3", "Offer Pending", "Offer", "Joined")

# Action suggestions per stage for day planner
STAGE_ACTIONS: Mapping[str, str] = MappingProxyType({
    "Screening": "Review profile & schedule call",
    "CV On Hold": "Review CV status & decide",
    "CV Shared": "Follow up with client",
    "CV Not Relevant": "Archive",
    "Duplicate": "Review & merge",
    "Not Interested": "Archive",
    "Interview Scheduled": "Confirm interview details",
    "Interview": "Prepare & follow up",
    "Round 1": "Check feedback & schedule R2",
    "Round 2": "Follow up on results",
    "Round 3": "Await final decision",
    "Selected": "Initiate documentation",
    "Rejected": "Archive",
    "Backout": "Find replacement",
    "On Hold": "Re-engage when ready",
    "Documents Requested": "Follow up on documents",
    "Documents Shared": "Verify documents",
    "Documents Verified": "Move to offer stage",
    "Offer Discussion": "Negotiate terms",
    "Offer Pending Approval": "Chase offer approval",
    "Offer Pending": "Chase offer letter",
    "Offer Released": "Follow up on acceptance",
    "Offer": "Negotiate & close",
    "Offer Accepted": "Schedule joining date",
    "Offer Rejected": "Re-negotiate or close",
    "Joining Pending": "Confirm joining date",
    "Joined": "Confirm joining",
    "Hired": "Onboarding follow-up",
})


def list_all_stages() -> Tuple[str, ...]:
    """Return every stage in pipeline order, without duplicates."""
    return ALL_STAGES


def is_known_stage(stage: Optional[str]) -> bool:
    """True when the stage belongs to a pipeline group."""
    return stage in STAGE_TO_GROUP


def group_of(stage: str) -> str:
    """
    Return the label of the group that owns a stage.

    Groups are searched in declaration order and the first group listing the
    stage wins, so "Rejected" maps to "Interview", not "Closed / Dropouts".

    Raises:
        UnknownStageError: if no group lists the stage.
    """
    for group in PIPELINE_GROUPS:
        if stage in group.stages:
            return group.label
    raise UnknownStageError(stage)


def find_group(label: str) -> PipelineGroup:
    """Look up a pipeline group by its label."""
    for group in PIPELINE_GROUPS:
        if group.label == label:
            return group
    raise KeyError(label)


def color_of(stage: Optional[str]) -> str:
    return STAGE_COLORS.get(stage, DEFAULT_STAGE_COLOR)


def variant_of(stage: Optional[str]) -> str:
    return STAGE_VARIANTS.get(stage, DEFAULT_STAGE_VARIANT)


def is_closed(stage: Optional[str]) -> bool:
    return stage in CLOSED_STAGES


def is_active(stage: Optional[str]) -> bool:
    """Anything not explicitly closed counts as active, including unknown stages."""
    return not is_closed(stage)


def suggested_action(stage: Optional[str], default: str = DEFAULT_ACTION) -> str:
    return STAGE_ACTIONS.get(stage, default)


@dataclass(frozen=True)
class CandidateCategories:
    """Day-planner flags derived from a candidate's stage and last update."""

    urgent: bool
    follow_up: bool
    stale: bool
    active: bool
    success: bool


def is_stale(stage: Optional[str], updated_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Open candidates untouched for more than a week are stale."""
    if updated_at is None or is_closed(stage):
        return False
    now = ensure_utc(now or utc_now())
    return now - ensure_utc(updated_at) > STALE_AFTER


def categorize(candidate: Any, now: Optional[datetime] = None) -> CandidateCategories:
    """
    Categorize a candidate for prioritisation.

    `candidate` is anything exposing `stage` and `updated_at` attributes
    (ORM rows, schemas) or a dict with those keys.
    """
    if isinstance(candidate, Mapping):
        stage = candidate.get("stage")
        updated_at = candidate.get("updated_at")
    else:
        stage = getattr(candidate, "stage", None)
        updated_at = getattr(candidate, "updated_at", None)

    return CandidateCategories(
        urgent=stage in URGENT_STAGES,
        follow_up=stage in FOLLOW_UP_STAGES,
        stale=is_stale(stage, updated_at, now),
        active=is_active(stage),
        success=stage in SUCCESS_STAGES,
    )
