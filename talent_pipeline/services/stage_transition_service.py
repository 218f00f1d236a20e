"""
Stage transition engine.

Every mutation of a pipeline entry goes through here and writes exactly one
activity record in the same transaction as the entry change.
"""

import logging
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from talent_pipeline.core.config import settings
from talent_pipeline.errors import (
    ConcurrentUpdateError,
    DuplicateEntryError,
    InvalidTransitionError,
    NotFoundError,
)
from talent_pipeline.models.enums import ActivityAction, PipelineStage
from talent_pipeline.models.pipeline_entry import PipelineEntry
from talent_pipeline.repositories.activity_repository import ActivityRepository
from talent_pipeline.repositories.pipeline_repository import PipelineRepository
from talent_pipeline.schemas.pipeline import PipelineEntryCreate
from talent_pipeline.services.base import ServiceBase, bounded
from talent_pipeline.services.events import EventPublisher
from talent_pipeline.services.stage_rules import action_for_stage, is_transition_allowed
from talent_pipeline.utils.time import utc_now

logger = logging.getLogger(__name__)

DUPLICATE_ENTRY_MESSAGE = "This candidate is already in the pipeline for this job"


class StageTransitionService(ServiceBase):
    """Validates and applies changes to pipeline entries."""

    def __init__(
        self,
        db: AsyncSession,
        publisher: Optional[EventPublisher] = None,
        timeout: Optional[float] = None,
        strict: Optional[bool] = None,
        max_retries: Optional[int] = None,
    ):
        super().__init__(db, publisher=publisher, timeout=timeout)
        self.pipeline = PipelineRepository(db)
        self.activity = ActivityRepository(db)
        self.strict = settings.STRICT_STAGE_TRANSITIONS if strict is None else strict
        self.max_retries = settings.STAGE_UPDATE_MAX_RETRIES if max_retries is None else max_retries

    async def _get_entry(self, pipeline_id: UUID) -> PipelineEntry:
        entry = await self.pipeline.get_by_id(pipeline_id)
        if entry is None:
            raise NotFoundError.for_resource("Pipeline entry", pipeline_id)
        return entry

    @bounded
    async def add_candidate(
        self,
        cv_submission_id: UUID,
        job_id: UUID,
        actor_id: Optional[UUID],
        stage: PipelineStage = PipelineStage.SOURCED,
        notes: Optional[str] = None,
        priority: int = 0,
    ) -> PipelineEntry:
        """Put a candidate into a job's funnel and log ``created``."""
        data = PipelineEntryCreate(
            cv_submission_id=cv_submission_id,
            job_id=job_id,
            stage=stage,
            notes=notes,
            priority=priority,
        )

        async with self.unit_of_work(duplicate_message=DUPLICATE_ENTRY_MESSAGE):
            if await self.pipeline.get_by_candidate_and_job(cv_submission_id, job_id) is not None:
                raise DuplicateEntryError(DUPLICATE_ENTRY_MESSAGE)

            entry = await self.pipeline.create(data)
            await self.activity.append(
                entry.id,
                ActivityAction.CREATED,
                actor_id,
                to_stage=entry.stage,
                note=notes,
            )

        logger.info("Added CV %s to job %s pipeline at %s", cv_submission_id, job_id, entry.stage)
        self.publish(
            "pipeline_candidate_added",
            "pipeline_entry",
            entry.id,
            actor_id,
            job_id=str(job_id),
            stage=entry.stage,
        )
        return entry

    @bounded
    async def change_stage(
        self,
        pipeline_id: UUID,
        target_stage: PipelineStage,
        actor_id: Optional[UUID],
        note: Optional[str] = None,
        rejection_reason: Optional[str] = None,
    ) -> PipelineEntry:
        """
        Move an entry to ``target_stage``.

        The write is version-checked; when another writer changed the entry
        between our read and our write the whole read-write cycle is retried,
        so the logged ``from_stage`` is always the stage this write replaced.

        Raises:
            NotFoundError: entry does not exist
            InvalidTransitionError: strict mode forbids the move
            ConcurrentUpdateError: still losing the race after all retries
        """
        target = PipelineStage(target_stage)
        attempt = 0
        while True:
            try:
                entry, from_stage = await self._apply_stage_change(
                    pipeline_id, target, actor_id, note, rejection_reason
                )
                break
            except ConcurrentUpdateError:
                attempt += 1
                if attempt > self.max_retries:
                    logger.error(
                        "Stage change of %s to %s abandoned after %d retries",
                        pipeline_id,
                        target.value,
                        self.max_retries,
                    )
                    raise
                logger.warning(
                    "Concurrent update on %s, retrying stage change (%d/%d)",
                    pipeline_id,
                    attempt,
                    self.max_retries,
                )

        logger.info("Pipeline %s moved %s -> %s", pipeline_id, from_stage, target.value)
        self.publish(
            "pipeline_stage_changed",
            "pipeline_entry",
            pipeline_id,
            actor_id,
            from_stage=from_stage,
            to_stage=target.value,
        )
        return entry

    async def _apply_stage_change(
        self,
        pipeline_id: UUID,
        target: PipelineStage,
        actor_id: Optional[UUID],
        note: Optional[str],
        rejection_reason: Optional[str],
    ) -> Tuple[PipelineEntry, str]:
        async with self.unit_of_work():
            entry = await self._get_entry(pipeline_id)
            from_stage = entry.stage

            if not is_transition_allowed(from_stage, target, self.strict):
                raise InvalidTransitionError(
                    f"Cannot move candidate from {from_stage} to {target.value}",
                    details={"from_stage": from_stage, "to_stage": target.value},
                )

            entry.stage = target.value
            entry.stage_entered_at = utc_now()
            if target == PipelineStage.REJECTED and rejection_reason:
                entry.rejection_reason = rejection_reason
            await self.pipeline.save(entry)

            await self.activity.append(
                pipeline_id,
                action_for_stage(target),
                actor_id,
                from_stage=from_stage,
                to_stage=target.value,
                note=note or rejection_reason,
            )

        return entry, from_stage

    @bounded
    async def remove_candidate(self, pipeline_id: UUID, actor_id: Optional[UUID]) -> None:
        """Hard-delete an entry. The ``removed`` record keeps the deleted id."""
        async with self.unit_of_work():
            entry = await self._get_entry(pipeline_id)
            from_stage = entry.stage
            await self.pipeline.delete(entry)
            await self.activity.append(
                pipeline_id,
                ActivityAction.REMOVED,
                actor_id,
                from_stage=from_stage,
            )

        logger.info("Removed pipeline entry %s (was %s)", pipeline_id, from_stage)
        self.publish("pipeline_candidate_removed", "pipeline_entry", pipeline_id, actor_id, stage=from_stage)

    @bounded
    async def update_priority(self, pipeline_id: UUID, priority: int, actor_id: Optional[UUID]) -> PipelineEntry:
        async with self.unit_of_work():
            entry = await self._get_entry(pipeline_id)
            entry.priority = priority
            await self.pipeline.save(entry)
            await self.activity.append(
                pipeline_id,
                ActivityAction.PRIORITY_CHANGED,
                actor_id,
                note=f"Priority set to {priority}",
            )

        logger.info("Pipeline %s priority set to %d", pipeline_id, priority)
        self.publish("pipeline_priority_changed", "pipeline_entry", pipeline_id, actor_id, priority=priority)
        return entry

    @bounded
    async def assign(
        self,
        pipeline_id: UUID,
        assigned_to: Optional[UUID],
        actor_id: Optional[UUID],
    ) -> PipelineEntry:
        """Assign the entry to a user, or clear the assignment with None."""
        async with self.unit_of_work():
            entry = await self._get_entry(pipeline_id)
            entry.assigned_to = assigned_to
            await self.pipeline.save(entry)
            await self.activity.append(
                pipeline_id,
                ActivityAction.ASSIGNED,
                actor_id,
                note="Assigned to user" if assigned_to else "Unassigned",
            )

        logger.info("Pipeline %s assigned to %s", pipeline_id, assigned_to)
        self.publish(
            "pipeline_assigned",
            "pipeline_entry",
            pipeline_id,
            actor_id,
            assigned_to=str(assigned_to) if assigned_to else None,
        )
        return entry

    @bounded
    async def update_notes(self, pipeline_id: UUID, notes: str, actor_id: Optional[UUID]) -> PipelineEntry:
        """Replace the entry's notes and log them as ``note_added``."""
        async with self.unit_of_work():
            entry = await self._get_entry(pipeline_id)
            entry.notes = notes
            await self.pipeline.save(entry)
            await self.activity.append(
                pipeline_id,
                ActivityAction.NOTE_ADDED,
                actor_id,
                note=notes,
            )

        logger.info("Pipeline %s notes updated", pipeline_id)
        self.publish("pipeline_note_added", "pipeline_entry", pipeline_id, actor_id, notes=notes[:100])
        return entry
