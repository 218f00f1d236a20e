"""
Funnel stage classification and the optional strict transition table.
"""

from typing import Dict, FrozenSet, Optional, Tuple

from talent_pipeline.models.enums import ActivityAction, PipelineStage

# Active stages in funnel order
FUNNEL_ORDER: Tuple[PipelineStage, ...] = (
    PipelineStage.SOURCED,
    PipelineStage.SCREENING,
    PipelineStage.QUALIFIED,
    PipelineStage.SUBMITTED,
    PipelineStage.INTERVIEW,
    PipelineStage.OFFER,
)

ACTIVE_STAGES: FrozenSet[PipelineStage] = frozenset(FUNNEL_ORDER)

TERMINAL_STAGES: FrozenSet[PipelineStage] = frozenset(
    {PipelineStage.PLACED, PipelineStage.REJECTED, PipelineStage.WITHDRAWN}
)

# Stages that are expected to collect scorecards
INTERVIEW_STAGES: FrozenSet[PipelineStage] = frozenset({PipelineStage.INTERVIEW})

_EXITS = frozenset({PipelineStage.REJECTED, PipelineStage.WITHDRAWN})

# Used only when STRICT_STAGE_TRANSITIONS is on. Each active stage may move
# one step forward or back, or exit; placed needs an offer first; closed
# entries can be reopened at sourced or screening.
ALLOWED_TRANSITIONS: Dict[PipelineStage, FrozenSet[PipelineStage]] = {
    PipelineStage.SOURCED: frozenset({PipelineStage.SCREENING}) | _EXITS,
    PipelineStage.SCREENING: frozenset({PipelineStage.SOURCED, PipelineStage.QUALIFIED}) | _EXITS,
    PipelineStage.QUALIFIED: frozenset({PipelineStage.SCREENING, PipelineStage.SUBMITTED}) | _EXITS,
    PipelineStage.SUBMITTED: frozenset({PipelineStage.QUALIFIED, PipelineStage.INTERVIEW}) | _EXITS,
    PipelineStage.INTERVIEW: frozenset({PipelineStage.SUBMITTED, PipelineStage.OFFER}) | _EXITS,
    PipelineStage.OFFER: frozenset({PipelineStage.INTERVIEW, PipelineStage.PLACED}) | _EXITS,
    PipelineStage.PLACED: frozenset({PipelineStage.WITHDRAWN}),
    PipelineStage.REJECTED: frozenset({PipelineStage.SOURCED, PipelineStage.SCREENING}),
    PipelineStage.WITHDRAWN: frozenset({PipelineStage.SOURCED, PipelineStage.SCREENING}),
}


def is_active_stage(stage: PipelineStage) -> bool:
    return PipelineStage(stage) in ACTIVE_STAGES


def is_terminal_stage(stage: PipelineStage) -> bool:
    return PipelineStage(stage) in TERMINAL_STAGES


def is_interview_stage(stage: PipelineStage) -> bool:
    return PipelineStage(stage) in INTERVIEW_STAGES


def next_stage(stage: PipelineStage) -> Optional[PipelineStage]:
    """Next active stage in funnel order, or None at the end of the funnel."""
    stage = PipelineStage(stage)
    if stage not in ACTIVE_STAGES:
        return None
    index = FUNNEL_ORDER.index(stage)
    if index + 1 >= len(FUNNEL_ORDER):
        return None
    return FUNNEL_ORDER[index + 1]


def is_transition_allowed(current: PipelineStage, target: PipelineStage, strict: bool) -> bool:
    """Permissive unless ``strict``; a no-op move to the same stage is always allowed."""
    current, target = PipelineStage(current), PipelineStage(target)
    if not strict or current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def action_for_stage(target: PipelineStage) -> ActivityAction:
    target = PipelineStage(target)
    if target == PipelineStage.REJECTED:
        return ActivityAction.REJECTED
    if target == PipelineStage.WITHDRAWN:
        return ActivityAction.WITHDRAWN
    return ActivityAction.STAGE_CHANGE
