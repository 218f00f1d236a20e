import uuid

import pytest

from talent_pipeline.errors import (
    ConcurrentUpdateError,
    DuplicateEntryError,
    InvalidTransitionError,
    NotFoundError,
)
from talent_pipeline.models.enums import PipelineStage
from talent_pipeline.services.activity_log_service import ActivityLogService
from talent_pipeline.services.pipeline_service import PipelineService
from talent_pipeline.services.stage_transition_service import StageTransitionService

from tests.factories import ACTOR_ID, CV_7, JOB_3, OTHER_ACTOR_ID


@pytest.mark.asyncio
async def test_add_candidate_then_move_to_screening(db):
    service = StageTransitionService(db)
    log = ActivityLogService(db)

    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)
    assert entry.stage == "sourced"
    assert entry.priority == 0
    assert entry.version == 1

    created = await log.chronology(entry.id)
    assert len(created) == 1
    assert created[0].action == "created"
    assert created[0].to_stage == "sourced"
    assert created[0].created_by == ACTOR_ID

    moved = await service.change_stage(entry.id, PipelineStage.SCREENING, ACTOR_ID)
    assert moved.stage == "screening"
    assert moved.version == 2

    timeline = await log.timeline(entry.id)
    assert len(timeline) == 2
    latest = timeline[0]
    assert latest.action == "stage_change"
    assert latest.from_stage == "sourced"
    assert latest.to_stage == "screening"


@pytest.mark.asyncio
async def test_add_candidate_records_initial_stage_and_notes(db):
    service = StageTransitionService(db)

    entry = await service.add_candidate(
        CV_7, JOB_3, ACTOR_ID, stage=PipelineStage.QUALIFIED, notes="Referred by client", priority=2
    )

    assert entry.stage == "qualified"
    assert entry.priority == 2
    [created] = await ActivityLogService(db).timeline(entry.id)
    assert created.to_stage == "qualified"
    assert created.note == "Referred by client"


@pytest.mark.asyncio
async def test_re_adding_same_candidate_is_rejected(db):
    service = StageTransitionService(db)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    with pytest.raises(DuplicateEntryError) as exc_info:
        await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    assert "already in the pipeline for this job" in exc_info.value.message
    assert exc_info.value.status_code == 409
    assert len(await PipelineService(db).list_entries(job_id=JOB_3)) == 1
    assert len(await ActivityLogService(db).timeline(entry.id)) == 1


@pytest.mark.asyncio
async def test_same_candidate_may_join_another_job(db):
    service = StageTransitionService(db)
    await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    other = await service.add_candidate(CV_7, uuid.UUID(int=4), ACTOR_ID)

    assert other.job_id == uuid.UUID(int=4)


@pytest.mark.asyncio
async def test_rejection_stores_reason_and_keeps_it_after_reopening(db):
    service = StageTransitionService(db)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    rejected = await service.change_stage(
        entry.id, PipelineStage.REJECTED, ACTOR_ID, rejection_reason="Salary expectations"
    )
    assert rejected.rejection_reason == "Salary expectations"

    latest = (await ActivityLogService(db).timeline(entry.id))[0]
    assert latest.action == "rejected"
    assert latest.note == "Salary expectations"

    reopened = await service.change_stage(entry.id, PipelineStage.SCREENING, ACTOR_ID)
    assert reopened.stage == "screening"
    assert reopened.rejection_reason == "Salary expectations"


@pytest.mark.asyncio
async def test_explicit_note_wins_over_rejection_reason(db):
    service = StageTransitionService(db)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    await service.change_stage(
        entry.id, PipelineStage.REJECTED, ACTOR_ID, note="Client feedback", rejection_reason="Not senior enough"
    )

    latest = (await ActivityLogService(db).timeline(entry.id))[0]
    assert latest.note == "Client feedback"


@pytest.mark.asyncio
async def test_reason_ignored_for_non_rejected_targets(db):
    service = StageTransitionService(db)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    moved = await service.change_stage(entry.id, PipelineStage.WITHDRAWN, ACTOR_ID, rejection_reason="n/a")

    assert moved.rejection_reason is None
    latest = (await ActivityLogService(db).timeline(entry.id))[0]
    assert latest.action == "withdrawn"


@pytest.mark.asyncio
async def test_permissive_engine_allows_skipping_stages(db):
    service = StageTransitionService(db, strict=False)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    placed = await service.change_stage(entry.id, PipelineStage.PLACED, ACTOR_ID)

    assert placed.stage == "placed"


@pytest.mark.asyncio
async def test_strict_engine_rejects_illegal_transition_without_logging(db):
    service = StageTransitionService(db, strict=True)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    with pytest.raises(InvalidTransitionError):
        await service.change_stage(entry.id, PipelineStage.PLACED, ACTOR_ID)

    current = await PipelineService(db).get_entry(entry.id)
    assert current.stage == "sourced"
    assert len(await ActivityLogService(db).timeline(entry.id)) == 1


@pytest.mark.asyncio
async def test_change_stage_of_unknown_entry(db):
    service = StageTransitionService(db)
    missing = uuid.uuid4()

    with pytest.raises(NotFoundError):
        await service.change_stage(missing, PipelineStage.SCREENING, ACTOR_ID)

    assert await ActivityLogService(db).timeline(missing) == []


@pytest.mark.asyncio
async def test_remove_candidate_keeps_audit_trail(db):
    service = StageTransitionService(db)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)
    await service.change_stage(entry.id, PipelineStage.SCREENING, ACTOR_ID)

    await service.remove_candidate(entry.id, ACTOR_ID)

    with pytest.raises(NotFoundError):
        await PipelineService(db).get_entry(entry.id)

    timeline = await ActivityLogService(db).timeline(entry.id)
    assert [record.action for record in timeline] == ["removed", "stage_change", "created"]
    assert timeline[0].from_stage == "screening"


@pytest.mark.asyncio
async def test_priority_assignment_and_notes_are_logged(db):
    service = StageTransitionService(db)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)
    owner = uuid.uuid4()

    updated = await service.update_priority(entry.id, 5, ACTOR_ID)
    assert updated.priority == 5
    updated = await service.assign(entry.id, owner, ACTOR_ID)
    assert updated.assigned_to == owner
    updated = await service.assign(entry.id, None, ACTOR_ID)
    assert updated.assigned_to is None
    updated = await service.update_notes(entry.id, "Strong Python background", ACTOR_ID)
    assert updated.notes == "Strong Python background"

    chronology = await ActivityLogService(db).chronology(entry.id)
    assert [(r.action, r.note) for r in chronology[1:]] == [
        ("priority_changed", "Priority set to 5"),
        ("assigned", "Assigned to user"),
        ("assigned", "Unassigned"),
        ("note_added", "Strong Python background"),
    ]
    assert updated.version == 5


@pytest.mark.asyncio
async def test_stage_change_publishes_event(db, events):
    publisher, received = events
    service = StageTransitionService(db, publisher=publisher)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    await service.change_stage(entry.id, PipelineStage.INTERVIEW, ACTOR_ID)

    assert [event.name for event in received] == ["pipeline_candidate_added", "pipeline_stage_changed"]
    assert received[-1].details == {"from_stage": "sourced", "to_stage": "interview"}
    assert received[-1].actor_id == ACTOR_ID


@pytest.mark.asyncio
async def test_concurrent_stage_change_is_retried(file_session_maker):
    async with file_session_maker() as setup:
        entry = await StageTransitionService(setup).add_candidate(CV_7, JOB_3, ACTOR_ID)
        entry_id = entry.id

    async with file_session_maker() as db_a, file_session_maker() as db_b:
        service_a = StageTransitionService(db_a)
        service_b = StageTransitionService(db_b)
        read_versions = []
        original_get = service_a.pipeline.get_by_id

        async def read_then_lose_race(pipeline_id):
            found = await original_get(pipeline_id)
            read_versions.append(found.version)
            if len(read_versions) == 1:
                # Another user moves the candidate between our read and our write
                await service_b.change_stage(pipeline_id, PipelineStage.SCREENING, OTHER_ACTOR_ID)
            return found

        service_a.pipeline.get_by_id = read_then_lose_race
        result = await service_a.change_stage(entry_id, PipelineStage.QUALIFIED, ACTOR_ID)

    assert read_versions == [1, 2]
    assert result.stage == "qualified"
    assert result.version == 3

    async with file_session_maker() as check:
        chronology = await ActivityLogService(check).chronology(entry_id)
    assert [(r.from_stage, r.to_stage) for r in chronology] == [
        (None, "sourced"),
        ("sourced", "screening"),
        ("screening", "qualified"),
    ]


@pytest.mark.asyncio
async def test_concurrent_stage_change_gives_up_after_retries(file_session_maker):
    async with file_session_maker() as setup:
        entry = await StageTransitionService(setup).add_candidate(CV_7, JOB_3, ACTOR_ID)
        entry_id = entry.id

    async with file_session_maker() as db_a, file_session_maker() as db_b:
        service_a = StageTransitionService(db_a, max_retries=0)
        service_b = StageTransitionService(db_b)
        original_get = service_a.pipeline.get_by_id

        async def always_lose_race(pipeline_id):
            found = await original_get(pipeline_id)
            await service_b.update_priority(pipeline_id, found.priority + 1, OTHER_ACTOR_ID)
            return found

        service_a.pipeline.get_by_id = always_lose_race
        with pytest.raises(ConcurrentUpdateError):
            await service_a.change_stage(entry_id, PipelineStage.SCREENING, ACTOR_ID)

    async with file_session_maker() as check:
        current = await PipelineService(check).get_entry(entry_id)
        chronology = await ActivityLogService(check).chronology(entry_id)
    assert current.stage == "sourced"
    assert [r.action for r in chronology] == ["created", "priority_changed"]
