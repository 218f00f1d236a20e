"""
Base model with common fields.

Engine tables inherit from this to get:
- id (UUID primary key)
- created_at (when the record was created)
- updated_at (when the record was last modified)
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from talent_pipeline.db.base import Base
from talent_pipeline.utils.time import utc_now


class TimestampedModel(Base):
    """
    Abstract base class for the engine's mutable tables.

    This is not a real table - it's a template that other models inherit from.
    Timestamps are set client-side so ordering keeps sub-second precision on
    every backend; the server default covers rows written outside the ORM.
    """

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        nullable=False,
    )
