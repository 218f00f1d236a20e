"""
InterviewScorecard model.

One interviewer's structured ratings for one interview round of a pipeline
entry. Several scorecards may exist per entry.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, SmallInteger, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from talent_pipeline.models.base_model import TimestampedModel
from talent_pipeline.models.enums import InterviewType

RATING_FIELDS = (
    "technical_skills",
    "communication",
    "cultural_fit",
    "motivation",
    "experience_relevance",
    "overall_impression",
)


class InterviewScorecard(TimestampedModel):
    """interview_scorecards table."""

    __tablename__ = "interview_scorecards"

    pipeline_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
    )

    # Funnel stage the interview belonged to
    stage: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
    )

    # Insertion order within the pipeline entry, starting at 1
    sequence: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Interview details
    interviewer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    interviewer_role: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    interview_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    interview_type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=InterviewType.VIDEO.value,
    )

    # Ratings, 1-5 or null
    technical_skills: Mapped[Optional[int]] = mapped_column(SmallInteger, nullable=True)
    communication: Mapped[Optional[int]] = mapped_column(SmallInteger, nullable=True)
    cultural_fit: Mapped[Optional[int]] = mapped_column(SmallInteger, nullable=True)
    motivation: Mapped[Optional[int]] = mapped_column(SmallInteger, nullable=True)
    experience_relevance: Mapped[Optional[int]] = mapped_column(SmallInteger, nullable=True)
    overall_impression: Mapped[Optional[int]] = mapped_column(SmallInteger, nullable=True)

    # Feedback
    strengths: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    concerns: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    questions_asked: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    candidate_questions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    recommendation: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    next_steps: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_client_feedback: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_interview_scorecards_pipeline_stage", "pipeline_id", "stage"),
        Index("uq_interview_scorecards_pipeline_sequence", "pipeline_id", "sequence", unique=True),
    )
