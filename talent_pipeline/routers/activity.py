"""
Activity router - the acting user's own activity feed.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.core.dependencies import Actor, get_db
from talent_pipeline.core.permissions import require_reader
from talent_pipeline.schemas.activity import PipelineActivityRead
from talent_pipeline.services.activity_log_service import ActivityLogService

router = APIRouter(prefix="/activity", tags=["activity"])


@router.get("/mine", response_model=List[PipelineActivityRead])
async def my_activity(
    actor: Actor = Depends(require_reader),
    db: AsyncSession = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
):
    """Most recent activity recorded by the calling user."""
    service = ActivityLogService(db)
    return await service.recent_for_actor(actor.user_id, limit=limit)
