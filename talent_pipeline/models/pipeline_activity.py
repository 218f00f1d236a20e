"""
PipelineActivity model.

Append-only audit trail for pipeline entries and their placements.
Rows are never updated or deleted.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from talent_pipeline.db.base import Base
from talent_pipeline.utils.time import utc_now


class PipelineActivity(Base):
    """
    pipeline_activity table - one row per mutation.

    ``pipeline_id`` deliberately has no foreign-key constraint: removal
    activities reference entries that no longer exist.
    The integer key doubles as the insertion-order tie-breaker.
    """

    __tablename__ = "pipeline_activity"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    pipeline_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
    )

    # See ActivityAction
    action: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    from_stage: Mapped[Optional[str]] = mapped_column(
        String(30),
        nullable=True,
    )

    to_stage: Mapped[Optional[str]] = mapped_column(
        String(30),
        nullable=True,
    )

    note: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_pipeline_activity_pipeline_created", "pipeline_id", "created_at"),
    )
