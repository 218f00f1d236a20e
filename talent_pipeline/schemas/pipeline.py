"""
Pipeline entry Pydantic schemas.
"""

from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from talent_pipeline.models.enums import PipelineStage
from talent_pipeline.schemas.base import TimestampedRead


class PipelineEntryCreate(BaseModel):
    """Schema for adding a candidate to a job's pipeline."""

    cv_submission_id: UUID
    job_id: UUID
    stage: PipelineStage = PipelineStage.SOURCED
    notes: Optional[str] = None
    priority: int = 0


class PipelineEntryRead(TimestampedRead):
    """Schema for reading pipeline entry data (API response)."""

    cv_submission_id: UUID
    job_id: UUID
    stage: PipelineStage
    priority: int
    notes: Optional[str] = None
    assigned_to: Optional[UUID] = None
    rejection_reason: Optional[str] = None
    stage_entered_at: datetime
    version: int


class StageChangeRequest(BaseModel):
    """Request to move an entry to another stage."""

    stage: PipelineStage
    note: Optional[str] = None
    rejection_reason: Optional[str] = None


class PriorityUpdateRequest(BaseModel):
    priority: int


class AssignRequest(BaseModel):
    """Request to (un)assign an entry; null clears the assignment."""

    assigned_to: Optional[UUID] = None


class NotesUpdateRequest(BaseModel):
    notes: str = Field(..., min_length=1)


class PipelineExistsRead(BaseModel):
    exists: bool
    id: Optional[UUID] = None
    stage: Optional[PipelineStage] = None


class PipelineStageCounts(BaseModel):
    """Entry counts per stage; every stage is present, zero-filled."""

    total: int
    by_stage: Dict[PipelineStage, int]
