import pytest

from talent_pipeline.models.enums import ActivityAction, PipelineStage
from talent_pipeline.services.stage_rules import (
    ALLOWED_TRANSITIONS,
    action_for_stage,
    is_active_stage,
    is_interview_stage,
    is_terminal_stage,
    is_transition_allowed,
    next_stage,
)


@pytest.mark.unit
def test_stages_split_into_active_and_terminal():
    for stage in PipelineStage:
        assert is_active_stage(stage) != is_terminal_stage(stage)

    assert is_terminal_stage(PipelineStage.PLACED)
    assert is_terminal_stage("rejected")
    assert is_active_stage(PipelineStage.OFFER)
    assert is_interview_stage(PipelineStage.INTERVIEW)
    assert not is_interview_stage(PipelineStage.SUBMITTED)


@pytest.mark.unit
def test_next_stage_follows_funnel_order():
    assert next_stage(PipelineStage.SOURCED) == PipelineStage.SCREENING
    assert next_stage(PipelineStage.SUBMITTED) == PipelineStage.INTERVIEW
    assert next_stage(PipelineStage.OFFER) is None
    assert next_stage(PipelineStage.REJECTED) is None


@pytest.mark.unit
def test_permissive_mode_allows_any_move():
    for current in PipelineStage:
        for target in PipelineStage:
            assert is_transition_allowed(current, target, strict=False)


@pytest.mark.unit
def test_strict_mode_uses_successor_table():
    assert set(ALLOWED_TRANSITIONS) == set(PipelineStage)
    assert is_transition_allowed(PipelineStage.SOURCED, PipelineStage.SCREENING, strict=True)
    assert is_transition_allowed(PipelineStage.INTERVIEW, PipelineStage.REJECTED, strict=True)
    assert not is_transition_allowed(PipelineStage.SOURCED, PipelineStage.PLACED, strict=True)
    assert is_transition_allowed(PipelineStage.OFFER, PipelineStage.OFFER, strict=True)


@pytest.mark.unit
def test_action_for_stage():
    assert action_for_stage(PipelineStage.REJECTED) == ActivityAction.REJECTED
    assert action_for_stage(PipelineStage.WITHDRAWN) == ActivityAction.WITHDRAWN
    assert action_for_stage(PipelineStage.PLACED) == ActivityAction.STAGE_CHANGE
    assert action_for_stage("screening") == ActivityAction.STAGE_CHANGE
