"""
Read access to the pipeline activity log.

Records are appended by the engine services inside their own transactions;
this service has no way to change or remove them.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.models.pipeline_activity import PipelineActivity
from talent_pipeline.repositories.activity_repository import ActivityRepository
from talent_pipeline.services.base import ServiceBase, bounded
from talent_pipeline.services.events import EventPublisher


class ActivityLogService(ServiceBase):

    def __init__(
        self,
        db: AsyncSession,
        publisher: Optional[EventPublisher] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(db, publisher=publisher, timeout=timeout)
        self.repository = ActivityRepository(db)

    @bounded
    async def timeline(self, pipeline_id: UUID) -> List[PipelineActivity]:
        """Newest first. Works for removed entries too."""
        return await self.repository.list_for_pipeline(pipeline_id, descending=True)

    @bounded
    async def chronology(self, pipeline_id: UUID) -> List[PipelineActivity]:
        """Oldest first."""
        return await self.repository.list_for_pipeline(pipeline_id, descending=False)

    @bounded
    async def recent_for_actor(self, created_by: UUID, limit: int = 50) -> List[PipelineActivity]:
        return await self.repository.list_for_actor(created_by, limit=limit)
