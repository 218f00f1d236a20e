"""
PipelineEntry model.

One candidate (CV submission) tracked through one job's hiring funnel.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column

from talent_pipeline.models.base_model import TimestampedModel
from talent_pipeline.models.enums import PipelineStage
from talent_pipeline.utils.time import utc_now


class PipelineEntry(TimestampedModel):
    """
    pipeline_entries table - a candidate's progress for a specific job.

    ``version`` is the optimistic-lock counter: every ORM UPDATE is issued as
    ``WHERE id = ? AND version = ?`` and fails with StaleDataError when another
    writer got there first.
    """

    __tablename__ = "pipeline_entries"

    # Opaque references owned by other systems
    cv_submission_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
    )

    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
    )

    stage: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=PipelineStage.SOURCED.value,
    )

    # Higher = more urgent
    priority: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    assigned_to: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    # Kept when the candidate later leaves the rejected stage
    rejection_reason: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    stage_entered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("cv_submission_id", "job_id", name="uq_pipeline_entries_cv_job"),
        Index("ix_pipeline_entries_job_stage", "job_id", "stage"),
    )
