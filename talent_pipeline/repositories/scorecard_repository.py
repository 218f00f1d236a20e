"""
InterviewScorecard repository - database operations for InterviewScorecard.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.models.interview_scorecard import InterviewScorecard


class ScorecardRepository:
    """Repository for InterviewScorecard database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_pipeline(self, pipeline_id: UUID) -> List[InterviewScorecard]:
        """All scorecards of an entry in insertion order."""
        result = await self.db.execute(
            select(InterviewScorecard)
            .where(InterviewScorecard.pipeline_id == pipeline_id)
            .order_by(InterviewScorecard.sequence.asc())
        )
        return list(result.scalars().all())

    async def get_by_id(self, scorecard_id: UUID) -> Optional[InterviewScorecard]:
        result = await self.db.execute(
            select(InterviewScorecard).where(InterviewScorecard.id == scorecard_id)
        )
        return result.scalar_one_or_none()

    async def exists_for_stage(self, pipeline_id: UUID, stage: str) -> bool:
        result = await self.db.execute(
            select(InterviewScorecard.id)
            .where(
                InterviewScorecard.pipeline_id == pipeline_id,
                InterviewScorecard.stage == stage,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def next_sequence(self, pipeline_id: UUID) -> int:
        result = await self.db.execute(
            select(func.max(InterviewScorecard.sequence)).where(
                InterviewScorecard.pipeline_id == pipeline_id
            )
        )
        current = result.scalar_one_or_none()
        return (current or 0) + 1

    async def create(self, values: Dict[str, Any]) -> InterviewScorecard:
        """Insert a scorecard, appending it after the entry's existing ones."""
        scorecard = InterviewScorecard(
            sequence=await self.next_sequence(values["pipeline_id"]),
            **values,
        )
        self.db.add(scorecard)
        await self.db.flush()
        await self.db.refresh(scorecard)
        return scorecard

    async def update(self, scorecard: InterviewScorecard, values: Dict[str, Any]) -> InterviewScorecard:
        for field, value in values.items():
            setattr(scorecard, field, value)

        await self.db.flush()
        await self.db.refresh(scorecard)
        return scorecard

    async def delete(self, scorecard: InterviewScorecard) -> None:
        await self.db.delete(scorecard)
        await self.db.flush()
