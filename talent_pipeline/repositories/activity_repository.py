"""
Repository for the append-only pipeline activity log.

Exposes inserts and reads only. There is no update or delete.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.models.enums import ActivityAction
from talent_pipeline.models.pipeline_activity import PipelineActivity


class ActivityRepository:
    """Insert and query helpers for pipeline activity records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(
        self,
        pipeline_id: UUID,
        action: ActivityAction,
        created_by: Optional[UUID],
        from_stage: Optional[str] = None,
        to_stage: Optional[str] = None,
        note: Optional[str] = None,
    ) -> PipelineActivity:
        record = PipelineActivity(
            pipeline_id=pipeline_id,
            action=action.value,
            from_stage=from_stage,
            to_stage=to_stage,
            note=note,
            created_by=created_by,
        )
        self.db.add(record)
        await self.db.flush()
        return record

    async def list_for_pipeline(
        self,
        pipeline_id: UUID,
        descending: bool = True,
    ) -> List[PipelineActivity]:
        """Records for one entry; newest first for timelines, oldest first for chronology."""
        if descending:
            ordering = (PipelineActivity.created_at.desc(), PipelineActivity.id.desc())
        else:
            ordering = (PipelineActivity.created_at.asc(), PipelineActivity.id.asc())

        result = await self.db.execute(
            select(PipelineActivity)
            .where(PipelineActivity.pipeline_id == pipeline_id)
            .order_by(*ordering)
        )
        return list(result.scalars().all())

    async def list_for_actor(self, created_by: UUID, limit: int = 50) -> List[PipelineActivity]:
        result = await self.db.execute(
            select(PipelineActivity)
            .where(PipelineActivity.created_by == created_by)
            .order_by(PipelineActivity.created_at.desc(), PipelineActivity.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
