"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from talent_pipeline.models.pipeline_entry import PipelineEntry
from talent_pipeline.models.pipeline_activity import PipelineActivity
from talent_pipeline.models.interview_scorecard import InterviewScorecard
from talent_pipeline.models.placement import Placement

__all__ = [
    "PipelineEntry",
    "PipelineActivity",
    "InterviewScorecard",
    "Placement",
]
