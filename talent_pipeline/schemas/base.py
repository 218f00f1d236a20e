"""
Base Pydantic schemas with common fields.

These are templates that other schemas inherit from.
"""

from datetime import datetime
from typing import Iterable
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TimestampedRead(BaseModel):
    """
    Base schema for reading engine records.

    Includes the auto-generated fields: id and timestamps.
    """

    id: UUID
    created_at: datetime
    updated_at: datetime

    # This tells Pydantic to work with SQLAlchemy models
    model_config = ConfigDict(from_attributes=True)


def reject_explicit_nulls(model: BaseModel, fields: Iterable[str]) -> None:
    """Raise when a partial update sends ``null`` for a required column."""
    nulled = sorted(name for name in fields if name in model.model_fields_set and getattr(model, name) is None)
    if nulled:
        raise ValueError(f"These fields cannot be null: {', '.join(nulled)}")
