import asyncio
import logging
import uuid

import pytest

from talent_pipeline.errors import (
    ConcurrentUpdateError,
    DuplicateEntryError,
    InvalidTransitionError,
    NotFoundError,
    OperationTimeoutError,
    StorageError,
    ValidationError,
)
from talent_pipeline.models.enums import PipelineStage
from talent_pipeline.schemas.pipeline import PipelineEntryCreate
from talent_pipeline.services.events import DomainEvent, EventPublisher
from talent_pipeline.services.pipeline_service import PipelineService
from talent_pipeline.services.stage_transition_service import StageTransitionService

from tests.factories import ACTOR_ID, CV_7, JOB_3


@pytest.mark.unit
def test_error_status_codes_and_payloads():
    assert DuplicateEntryError("dup").status_code == 409
    assert NotFoundError("gone").status_code == 404
    assert ValidationError("bad").status_code == 422
    assert InvalidTransitionError("no").status_code == 422
    assert StorageError("db").status_code == 500
    assert ConcurrentUpdateError("race").status_code == 409
    assert OperationTimeoutError("slow").status_code == 504

    assert issubclass(InvalidTransitionError, ValidationError)
    assert issubclass(ConcurrentUpdateError, StorageError)
    assert issubclass(OperationTimeoutError, StorageError)

    assert DuplicateEntryError("dup").payload == {"error": {"code": "duplicate_entry", "message": "dup"}}
    missing = NotFoundError.for_resource("Placement", "p-1")
    assert missing.payload == {
        "error": {
            "code": "not_found",
            "message": "Placement p-1 not found",
            "details": {"resource": "Placement", "id": "p-1"},
        }
    }


@pytest.mark.unit
def test_failing_subscriber_does_not_block_others(caplog):
    publisher = EventPublisher()
    received = []

    def broken(event):
        raise RuntimeError("toast service down")

    publisher.subscribe(broken)
    publisher.subscribe(received.append)

    with caplog.at_level(logging.ERROR, logger="talent_pipeline.services.events"):
        publisher.publish(DomainEvent(name="pipeline_stage_changed", resource_type="pipeline_entry", resource_id=1))

    assert len(received) == 1
    assert "failed for pipeline_stage_changed" in caplog.text


@pytest.mark.unit
def test_unsubscribe():
    publisher = EventPublisher()
    received = []
    publisher.subscribe(received.append)
    publisher.unsubscribe(received.append)

    publisher.publish(DomainEvent(name="x", resource_type="placement", resource_id=1))

    assert received == []


@pytest.mark.asyncio
async def test_committed_change_survives_subscriber_failure(db):
    publisher = EventPublisher()

    def broken(event):
        raise RuntimeError("boom")

    publisher.subscribe(broken)
    service = StageTransitionService(db, publisher=publisher)

    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)
    moved = await service.change_stage(entry.id, PipelineStage.SCREENING, ACTOR_ID)

    assert moved.stage == "screening"
    assert (await PipelineService(db).get_entry(entry.id)).stage == "screening"


@pytest.mark.asyncio
async def test_slow_operation_times_out(db):
    service = PipelineService(db, timeout=0.05)

    async def slow_lookup(pipeline_id):
        await asyncio.sleep(1)

    service.repository.get_by_id = slow_lookup

    with pytest.raises(OperationTimeoutError) as exc_info:
        await service.get_entry(uuid.uuid4())

    assert exc_info.value.details == {"operation": "get_entry"}


@pytest.mark.asyncio
async def test_rejected_operation_keeps_loaded_objects_usable(db):
    service = StageTransitionService(db)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    with pytest.raises(NotFoundError):
        await service.update_priority(uuid.uuid4(), 3, ACTOR_ID)

    assert entry.stage == "sourced"
    assert entry.priority == 0


@pytest.mark.asyncio
async def test_error_after_flush_discards_the_write(db):
    service = StageTransitionService(db)

    with pytest.raises(ValidationError):
        async with service.unit_of_work():
            await service.pipeline.create(PipelineEntryCreate(cv_submission_id=CV_7, job_id=JOB_3))
            raise ValidationError("stop")

    assert await PipelineService(db).find_entry(CV_7, JOB_3) is None


@pytest.mark.asyncio
async def test_unique_violation_that_slips_past_the_lookup(db):
    service = StageTransitionService(db)
    entry = await service.add_candidate(CV_7, JOB_3, ACTOR_ID)
    entry_id = entry.id

    async def nothing_found(cv_submission_id, job_id):
        return None

    service.pipeline.get_by_candidate_and_job = nothing_found

    with pytest.raises(DuplicateEntryError) as exc_info:
        await service.add_candidate(CV_7, JOB_3, ACTOR_ID)

    assert exc_info.value.message == "This candidate is already in the pipeline for this job"
    assert (await PipelineService(db).get_entry(entry_id)).stage == "sourced"
