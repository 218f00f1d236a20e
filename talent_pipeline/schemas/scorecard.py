"""
Interview scorecard Pydantic schemas.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from talent_pipeline.models.enums import InterviewType, PipelineStage, Recommendation
from talent_pipeline.schemas.base import TimestampedRead, reject_explicit_nulls


class ScorecardFields(BaseModel):
    """Editable scorecard content shared by create and read models."""

    interviewer_name: Optional[str] = Field(default=None, max_length=255)
    interviewer_role: Optional[str] = Field(default=None, max_length=255)
    interview_date: Optional[datetime] = None
    interview_type: InterviewType = InterviewType.VIDEO

    technical_skills: Optional[int] = Field(default=None, ge=1, le=5)
    communication: Optional[int] = Field(default=None, ge=1, le=5)
    cultural_fit: Optional[int] = Field(default=None, ge=1, le=5)
    motivation: Optional[int] = Field(default=None, ge=1, le=5)
    experience_relevance: Optional[int] = Field(default=None, ge=1, le=5)
    overall_impression: Optional[int] = Field(default=None, ge=1, le=5)

    strengths: Optional[str] = None
    concerns: Optional[str] = None
    notes: Optional[str] = None
    questions_asked: Optional[str] = None
    candidate_questions: Optional[str] = None

    recommendation: Optional[Recommendation] = None
    next_steps: Optional[str] = None
    is_client_feedback: bool = False


class ScorecardCreate(ScorecardFields):
    """Schema for recording a new scorecard."""

    pipeline_id: UUID
    stage: PipelineStage


class ScorecardUpdate(BaseModel):
    """Explicit edit of an existing scorecard. All fields optional."""

    stage: Optional[PipelineStage] = None
    interviewer_name: Optional[str] = Field(default=None, max_length=255)
    interviewer_role: Optional[str] = Field(default=None, max_length=255)
    interview_date: Optional[datetime] = None
    interview_type: Optional[InterviewType] = None

    technical_skills: Optional[int] = Field(default=None, ge=1, le=5)
    communication: Optional[int] = Field(default=None, ge=1, le=5)
    cultural_fit: Optional[int] = Field(default=None, ge=1, le=5)
    motivation: Optional[int] = Field(default=None, ge=1, le=5)
    experience_relevance: Optional[int] = Field(default=None, ge=1, le=5)
    overall_impression: Optional[int] = Field(default=None, ge=1, le=5)

    strengths: Optional[str] = None
    concerns: Optional[str] = None
    notes: Optional[str] = None
    questions_asked: Optional[str] = None
    candidate_questions: Optional[str] = None

    recommendation: Optional[Recommendation] = None
    next_steps: Optional[str] = None
    is_client_feedback: Optional[bool] = None

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "ScorecardUpdate":
        reject_explicit_nulls(self, ("stage", "interview_type", "is_client_feedback"))
        return self


class ScorecardRead(TimestampedRead, ScorecardFields):
    model_config = ConfigDict(from_attributes=True)

    pipeline_id: UUID
    stage: PipelineStage
    sequence: int
    created_by: Optional[UUID] = None


class ScorecardAverages(BaseModel):
    """Mean of the non-null ratings per field; null when no scorecard rated it."""

    technical_skills: Optional[float] = None
    communication: Optional[float] = None
    cultural_fit: Optional[float] = None
    motivation: Optional[float] = None
    experience_relevance: Optional[float] = None
    overall_impression: Optional[float] = None


class ScorecardSummary(BaseModel):
    count: int
    averages: ScorecardAverages
    recommendations: List[Recommendation]
    latest_scorecard: ScorecardRead


class ScorecardExistsRead(BaseModel):
    exists: bool
