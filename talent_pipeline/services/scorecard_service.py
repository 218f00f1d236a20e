"""
Interview scorecard aggregation.

Collects scorecards per pipeline entry and computes the per-entry summary
used on the candidate card.
"""

import logging
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.errors import NotFoundError
from talent_pipeline.models.enums import ActivityAction, PipelineStage, Recommendation
from talent_pipeline.models.interview_scorecard import RATING_FIELDS, InterviewScorecard
from talent_pipeline.repositories.activity_repository import ActivityRepository
from talent_pipeline.repositories.pipeline_repository import PipelineRepository
from talent_pipeline.repositories.scorecard_repository import ScorecardRepository
from talent_pipeline.schemas.scorecard import (
    ScorecardAverages,
    ScorecardCreate,
    ScorecardRead,
    ScorecardSummary,
    ScorecardUpdate,
)
from talent_pipeline.services.base import ServiceBase, bounded, column_values
from talent_pipeline.services.events import EventPublisher

logger = logging.getLogger(__name__)

CONCURRENT_SCORECARD_MESSAGE = "Another scorecard was recorded for this entry at the same time. Please retry."


def _mean(values: Sequence[Optional[int]]) -> Optional[float]:
    rated = [value for value in values if value is not None]
    if not rated:
        return None
    return sum(rated) / len(rated)


def average_score(scorecard: InterviewScorecard) -> Optional[float]:
    """Mean of one scorecard's own ratings, ignoring blanks."""
    return _mean([getattr(scorecard, field) for field in RATING_FIELDS])


def summarize_scorecards(scorecards: Sequence[InterviewScorecard]) -> Optional[ScorecardSummary]:
    """
    Summary of an entry's scorecards, or None when there are none.

    ``scorecards`` must be in insertion order; the last one is reported as
    the latest.
    """
    if not scorecards:
        return None

    averages = ScorecardAverages(
        **{field: _mean([getattr(card, field) for card in scorecards]) for field in RATING_FIELDS}
    )
    recommendations = [
        Recommendation(card.recommendation) for card in scorecards if card.recommendation is not None
    ]
    return ScorecardSummary(
        count=len(scorecards),
        averages=averages,
        recommendations=recommendations,
        latest_scorecard=ScorecardRead.model_validate(scorecards[-1]),
    )


class ScorecardService(ServiceBase):
    """Service for interview scorecards."""

    def __init__(
        self,
        db: AsyncSession,
        publisher: Optional[EventPublisher] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(db, publisher=publisher, timeout=timeout)
        self.repository = ScorecardRepository(db)
        self.pipeline = PipelineRepository(db)
        self.activity = ActivityRepository(db)

    async def _get_scorecard(self, scorecard_id: UUID) -> InterviewScorecard:
        scorecard = await self.repository.get_by_id(scorecard_id)
        if scorecard is None:
            raise NotFoundError.for_resource("Scorecard", scorecard_id)
        return scorecard

    @bounded
    async def add_scorecard(self, data: ScorecardCreate, actor_id: Optional[UUID]) -> InterviewScorecard:
        """
        Record a scorecard against an existing pipeline entry.

        Several scorecards per stage are allowed; callers that want to warn
        about a repeat use ``exists_for_stage`` first. When two adds race for
        the same sequence number, the later one raises DuplicateEntryError.
        """
        async with self.unit_of_work(duplicate_message=CONCURRENT_SCORECARD_MESSAGE):
            if await self.pipeline.get_by_id(data.pipeline_id) is None:
                raise NotFoundError.for_resource("Pipeline entry", data.pipeline_id)

            values = column_values(data.model_dump())
            values["created_by"] = actor_id
            scorecard = await self.repository.create(values)

            recommendation = data.recommendation.value if data.recommendation else "No recommendation yet"
            await self.activity.append(
                data.pipeline_id,
                ActivityAction.SCORECARD_ADDED,
                actor_id,
                note=f"Scorecard added for {data.stage.value}: {recommendation}",
            )

        logger.info("Scorecard %s added to pipeline %s for %s", scorecard.id, data.pipeline_id, data.stage.value)
        self.publish(
            "scorecard_created",
            "interview_scorecard",
            scorecard.id,
            actor_id,
            stage=scorecard.stage,
            recommendation=scorecard.recommendation,
        )
        return scorecard

    @bounded
    async def update_scorecard(
        self,
        scorecard_id: UUID,
        data: ScorecardUpdate,
        actor_id: Optional[UUID] = None,
    ) -> InterviewScorecard:
        async with self.unit_of_work():
            scorecard = await self._get_scorecard(scorecard_id)
            values = column_values(data.model_dump(exclude_unset=True))
            scorecard = await self.repository.update(scorecard, values)

        logger.info("Scorecard %s updated (%s)", scorecard_id, ", ".join(sorted(values)))
        self.publish("scorecard_updated", "interview_scorecard", scorecard_id, actor_id, fields=sorted(values))
        return scorecard

    @bounded
    async def delete_scorecard(self, scorecard_id: UUID, actor_id: Optional[UUID] = None) -> None:
        async with self.unit_of_work():
            scorecard = await self._get_scorecard(scorecard_id)
            await self.repository.delete(scorecard)

        logger.info("Scorecard %s deleted", scorecard_id)
        self.publish("scorecard_deleted", "interview_scorecard", scorecard_id, actor_id)

    @bounded
    async def get_scorecard(self, scorecard_id: UUID) -> InterviewScorecard:
        return await self._get_scorecard(scorecard_id)

    @bounded
    async def list_scorecards(self, pipeline_id: UUID):
        return await self.repository.list_for_pipeline(pipeline_id)

    @bounded
    async def exists_for_stage(self, pipeline_id: UUID, stage: PipelineStage) -> bool:
        return await self.repository.exists_for_stage(pipeline_id, PipelineStage(stage).value)

    @bounded
    async def summarize(self, pipeline_id: UUID) -> Optional[ScorecardSummary]:
        scorecards = await self.repository.list_for_pipeline(pipeline_id)
        return summarize_scorecards(scorecards)
