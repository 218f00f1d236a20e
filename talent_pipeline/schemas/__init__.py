"""
Schemas package.

Import all schemas here for easy access.
"""

from talent_pipeline.schemas.activity import PipelineActivityRead
from talent_pipeline.schemas.pipeline import (
    AssignRequest,
    NotesUpdateRequest,
    PipelineEntryCreate,
    PipelineEntryRead,
    PipelineExistsRead,
    PipelineStageCounts,
    PriorityUpdateRequest,
    StageChangeRequest,
)
from talent_pipeline.schemas.placement import (
    InvoiceRaisedRequest,
    PlacementCreate,
    PlacementRead,
    PlacementStats,
    PlacementStatusRequest,
    PlacementUpdate,
    RebateRequest,
)
from talent_pipeline.schemas.scorecard import (
    ScorecardAverages,
    ScorecardCreate,
    ScorecardExistsRead,
    ScorecardRead,
    ScorecardSummary,
    ScorecardUpdate,
)

__all__ = [
    "PipelineActivityRead",
    "AssignRequest",
    "NotesUpdateRequest",
    "PipelineEntryCreate",
    "PipelineEntryRead",
    "PipelineExistsRead",
    "PipelineStageCounts",
    "PriorityUpdateRequest",
    "StageChangeRequest",
    "InvoiceRaisedRequest",
    "PlacementCreate",
    "PlacementRead",
    "PlacementStats",
    "PlacementStatusRequest",
    "PlacementUpdate",
    "RebateRequest",
    "ScorecardAverages",
    "ScorecardCreate",
    "ScorecardExistsRead",
    "ScorecardRead",
    "ScorecardSummary",
    "ScorecardUpdate",
]
