"""
Scorecard router - API endpoints for interview scorecards.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.core.dependencies import Actor, get_db, get_event_publisher
from talent_pipeline.core.permissions import require_reader, require_writer
from talent_pipeline.models.enums import PipelineStage
from talent_pipeline.schemas.scorecard import (
    ScorecardCreate,
    ScorecardExistsRead,
    ScorecardRead,
    ScorecardSummary,
    ScorecardUpdate,
)
from talent_pipeline.services.events import EventPublisher
from talent_pipeline.services.scorecard_service import ScorecardService

router = APIRouter(tags=["scorecards"])


@router.post("/scorecards", response_model=ScorecardRead, status_code=status.HTTP_201_CREATED)
async def add_scorecard(
    data: ScorecardCreate,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Record an interview scorecard against a pipeline entry."""
    service = ScorecardService(db, publisher=publisher)
    return await service.add_scorecard(data, actor.user_id)


@router.get("/scorecards/{scorecard_id}", response_model=ScorecardRead)
async def get_scorecard(
    scorecard_id: UUID,
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
):
    service = ScorecardService(db)
    return await service.get_scorecard(scorecard_id)


@router.put("/scorecards/{scorecard_id}", response_model=ScorecardRead)
async def update_scorecard(
    scorecard_id: UUID,
    data: ScorecardUpdate,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    """Edit a scorecard. Only fields present in the body are changed."""
    service = ScorecardService(db, publisher=publisher)
    return await service.update_scorecard(scorecard_id, data, actor.user_id)


@router.delete("/scorecards/{scorecard_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_scorecard(
    scorecard_id: UUID,
    actor: Actor = Depends(require_writer),
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
):
    service = ScorecardService(db, publisher=publisher)
    await service.delete_scorecard(scorecard_id, actor.user_id)


@router.get("/pipeline/{pipeline_id}/scorecards", response_model=List[ScorecardRead])
async def list_scorecards(
    pipeline_id: UUID,
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
):
    """Scorecards of an entry in the order they were recorded."""
    service = ScorecardService(db)
    return await service.list_scorecards(pipeline_id)


@router.get("/pipeline/{pipeline_id}/scorecards/summary", response_model=Optional[ScorecardSummary])
async def scorecard_summary(
    pipeline_id: UUID,
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
):
    """Rating averages and recommendations; null when the entry has no scorecards."""
    service = ScorecardService(db)
    return await service.summarize(pipeline_id)


@router.get("/pipeline/{pipeline_id}/scorecards/exists", response_model=ScorecardExistsRead)
async def scorecard_exists(
    pipeline_id: UUID,
    stage: PipelineStage,
    _: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
):
    service = ScorecardService(db)
    return ScorecardExistsRead(exists=await service.exists_for_stage(pipeline_id, stage))
