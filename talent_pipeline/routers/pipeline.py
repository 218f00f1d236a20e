"""
Pipeline router - API endpoints for candidate pipeline entries.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.core.dependencies import Actor, get_db, get_event_publisher
from talent_pipeline.core.permissions import require_reader, require_writer
from talent_pipeline.models.enums import PipelineStage
from talent_pipeline.schemas.activity import PipelineActivityRead
from talent_pipeline.schemas.pipeline import (
    AssignRequest,
    NotesUpdateRequest,
    PipelineEntryCreate,
    PipelineEntryRead,
    PipelineExistsRead,
    PipelineStageCounts,
    PriorityUpdateRequest,
    StageChangeRequest,
)
from talent_pipeline.services.activity_log_service import ActivityLogService
from talent_pipeline.services.events import EventPublisher
from talent_pipeline.services.pipeline_service import PipelineService
from talent_pipeline.services.stage_transition_service import StageTransitionService

router = APIRouter(prefix="/pipeline", tags=["pipeline"])


@router.post("", response_model=PipelineEntryRead, status_code=status.HTTP_201_CREATED)
async def add_candidate(
    data: PipelineEntryCreate,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Add a candidate to a job's pipeline. 409 if they are already in it."""
    service = StageTransitionService(db, publisher=publisher)
    return await service.add_candidate(
        cv_submission_id=data.cv_submission_id,
        job_id=data.job_id,
        actor_id=actor.user_id,
        stage=data.stage,
        notes=data.notes,
        priority=data.priority,
    )


@router.get("", response_model=List[PipelineEntryRead])
async def list_entries(
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
    job_id: Optional[UUID] = None,
    stage: Optional[PipelineStage] = None,
    assigned_to: Optional[UUID] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """
    List pipeline entries with pagination and filters.

    Filters: job_id, stage, assigned_to.
    """
    service = PipelineService(db)
    return await service.list_entries(
        job_id=job_id,
        stage=stage,
        assigned_to=assigned_to,
        limit=limit,
        offset=offset,
    )


@router.get("/stats", response_model=PipelineStageCounts)
async def stage_counts(
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
    job_id: Optional[UUID] = None,
):
    """Entry counts for every stage, optionally for one job."""
    service = PipelineService(db)
    return await service.stage_counts(job_id)


@router.get("/exists", response_model=PipelineExistsRead)
async def entry_exists(
    cv_submission_id: UUID,
    job_id: UUID,
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
):
    service = PipelineService(db)
    entry = await service.find_entry(cv_submission_id, job_id)
    if entry is None:
        return PipelineExistsRead(exists=False)
    return PipelineExistsRead(exists=True, id=entry.id, stage=entry.stage)


@router.get("/by-job/{job_id}", response_model=List[PipelineEntryRead])
async def list_by_job(
    job_id: UUID,
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
):
    """A job's board, most urgent first."""
    service = PipelineService(db)
    return await service.list_by_job(job_id)


@router.get("/{pipeline_id}", response_model=PipelineEntryRead)
async def get_entry(
    pipeline_id: UUID,
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
):
    service = PipelineService(db)
    return await service.get_entry(pipeline_id)


@router.delete("/{pipeline_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_candidate(
    pipeline_id: UUID,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Remove a candidate from the pipeline. The activity trail is kept."""
    service = StageTransitionService(db, publisher=publisher)
    await service.remove_candidate(pipeline_id, actor.user_id)


@router.post("/{pipeline_id}/stage", response_model=PipelineEntryRead)
async def change_stage(
    pipeline_id: UUID,
    data: StageChangeRequest,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Move an entry to another stage."""
    service = StageTransitionService(db, publisher=publisher)
    return await service.change_stage(
        pipeline_id,
        data.stage,
        actor.user_id,
        note=data.note,
        rejection_reason=data.rejection_reason,
    )


@router.post("/{pipeline_id}/priority", response_model=PipelineEntryRead)
async def update_priority(
    pipeline_id: UUID,
    data: PriorityUpdateRequest,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    service = StageTransitionService(db, publisher=publisher)
    return await service.update_priority(pipeline_id, data.priority, actor.user_id)


@router.post("/{pipeline_id}/assign", response_model=PipelineEntryRead)
async def assign(
    pipeline_id: UUID,
    data: AssignRequest,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Assign an entry to a user; send null to unassign."""
    service = StageTransitionService(db, publisher=publisher)
    return await service.assign(pipeline_id, data.assigned_to, actor.user_id)


@router.post("/{pipeline_id}/notes", response_model=PipelineEntryRead)
async def update_notes(
    pipeline_id: UUID,
    data: NotesUpdateRequest,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    service = StageTransitionService(db, publisher=publisher)
    return await service.update_notes(pipeline_id, data.notes, actor.user_id)


@router.get("/{pipeline_id}/activity", response_model=List[PipelineActivityRead])
async def activity(
    pipeline_id: UUID,
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
    order: str = Query("desc", pattern="^(asc|desc)$"),
):
    """
    Activity trail of an entry.

    Newest first by default; ``order=asc`` gives the chronology. Removed
    entries still have their trail.
    """
    service = ActivityLogService(db)
    if order == "asc":
        return await service.chronology(pipeline_id)
    return await service.timeline(pipeline_id)
