"""
PipelineEntry repository - database operations for PipelineEntry.
"""

from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.models.pipeline_entry import PipelineEntry
from talent_pipeline.schemas.pipeline import PipelineEntryCreate


class PipelineRepository:
    """Repository for PipelineEntry database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        limit: int = 50,
        offset: int = 0,
        job_id: Optional[UUID] = None,
        stage: Optional[str] = None,
        assigned_to: Optional[UUID] = None,
    ) -> List[PipelineEntry]:
        """List entries with filters, most recently updated first."""
        query = select(PipelineEntry)

        if job_id is not None:
            query = query.where(PipelineEntry.job_id == job_id)
        if stage is not None:
            query = query.where(PipelineEntry.stage == stage)
        if assigned_to is not None:
            query = query.where(PipelineEntry.assigned_to == assigned_to)

        query = query.order_by(PipelineEntry.updated_at.desc())
        query = query.limit(limit).offset(offset)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_by_job(self, job_id: UUID) -> List[PipelineEntry]:
        """Board order for one job: most urgent first, then most recently touched."""
        result = await self.db.execute(
            select(PipelineEntry)
            .where(PipelineEntry.job_id == job_id)
            .order_by(PipelineEntry.priority.desc(), PipelineEntry.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_id(self, pipeline_id: UUID) -> Optional[PipelineEntry]:
        """
        Get an entry by ID.

        Always re-reads the row so that a retry after a stale write sees the
        other writer's committed state instead of the identity-map copy.
        """
        result = await self.db.execute(
            select(PipelineEntry)
            .where(PipelineEntry.id == pipeline_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_candidate_and_job(
        self,
        cv_submission_id: UUID,
        job_id: UUID,
    ) -> Optional[PipelineEntry]:
        """Get the entry for a candidate-job pair if it exists."""
        result = await self.db.execute(
            select(PipelineEntry).where(
                PipelineEntry.cv_submission_id == cv_submission_id,
                PipelineEntry.job_id == job_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, data: PipelineEntryCreate) -> PipelineEntry:
        """Insert a new entry; the unique (cv_submission_id, job_id) constraint fires on flush."""
        entry = PipelineEntry(
            cv_submission_id=data.cv_submission_id,
            job_id=data.job_id,
            stage=data.stage.value,
            notes=data.notes,
            priority=data.priority,
        )
        self.db.add(entry)
        await self.db.flush()
        await self.db.refresh(entry)
        return entry

    async def save(self, entry: PipelineEntry) -> PipelineEntry:
        """Flush pending attribute changes (version-checked) and reload."""
        await self.db.flush()
        await self.db.refresh(entry)
        return entry

    async def delete(self, entry: PipelineEntry) -> None:
        await self.db.delete(entry)
        await self.db.flush()

    async def count_by_stage(self, job_id: Optional[UUID] = None) -> Dict[str, int]:
        """Entry counts grouped by stage (stages with no entries are absent)."""
        query = select(PipelineEntry.stage, func.count(PipelineEntry.id)).group_by(PipelineEntry.stage)
        if job_id is not None:
            query = query.where(PipelineEntry.job_id == job_id)

        result = await self.db.execute(query)
        return {stage: count for stage, count in result.all()}
