"""
Pipeline activity Pydantic schemas.

Read-only: activity records are written by the engine services only.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from talent_pipeline.models.enums import ActivityAction


class PipelineActivityRead(BaseModel):
    id: int
    pipeline_id: UUID
    action: ActivityAction
    from_stage: Optional[str] = None
    to_stage: Optional[str] = None
    note: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
