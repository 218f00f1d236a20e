"""
Pipeline read service.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.errors import NotFoundError
from talent_pipeline.models.enums import PipelineStage
from talent_pipeline.models.pipeline_entry import PipelineEntry
from talent_pipeline.repositories.pipeline_repository import PipelineRepository
from talent_pipeline.schemas.pipeline import PipelineStageCounts
from talent_pipeline.services.base import ServiceBase, bounded
from talent_pipeline.services.events import EventPublisher


class PipelineService(ServiceBase):
    """Queries over pipeline entries. Writes live in StageTransitionService."""

    def __init__(
        self,
        db: AsyncSession,
        publisher: Optional[EventPublisher] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(db, publisher=publisher, timeout=timeout)
        self.repository = PipelineRepository(db)

    @bounded
    async def get_entry(self, pipeline_id: UUID) -> PipelineEntry:
        entry = await self.repository.get_by_id(pipeline_id)
        if entry is None:
            raise NotFoundError.for_resource("Pipeline entry", pipeline_id)
        return entry

    @bounded
    async def find_entry(self, cv_submission_id: UUID, job_id: UUID) -> Optional[PipelineEntry]:
        """The entry for a candidate-job pair, or None when the candidate is not in that funnel."""
        return await self.repository.get_by_candidate_and_job(cv_submission_id, job_id)

    @bounded
    async def list_entries(
        self,
        job_id: Optional[UUID] = None,
        stage: Optional[PipelineStage] = None,
        assigned_to: Optional[UUID] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[PipelineEntry]:
        return await self.repository.list(
            limit=limit,
            offset=offset,
            job_id=job_id,
            stage=PipelineStage(stage).value if stage is not None else None,
            assigned_to=assigned_to,
        )

    @bounded
    async def list_by_job(self, job_id: UUID) -> List[PipelineEntry]:
        return await self.repository.list_by_job(job_id)

    @bounded
    async def stage_counts(self, job_id: Optional[UUID] = None) -> PipelineStageCounts:
        counts = await self.repository.count_by_stage(job_id)
        by_stage = {stage: counts.get(stage.value, 0) for stage in PipelineStage}
        return PipelineStageCounts(total=sum(by_stage.values()), by_stage=by_stage)
