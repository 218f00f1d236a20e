"""Shared identities and builders for the engine tests."""

import uuid
from datetime import date
from decimal import Decimal

from talent_pipeline.models.enums import JobType
from talent_pipeline.schemas.placement import PlacementCreate
from talent_pipeline.services.stage_transition_service import StageTransitionService

ACTOR_ID = uuid.UUID("00000000-0000-0000-0000-00000000a11c")
OTHER_ACTOR_ID = uuid.UUID("00000000-0000-0000-0000-0000000000b0")

# The candidate / job pair from the worked examples
CV_7 = uuid.UUID(int=7)
JOB_3 = uuid.UUID(int=3)

WRITER_HEADERS = {"X-User-ID": str(ACTOR_ID), "X-User-Role": "consultant"}
VIEWER_HEADERS = {"X-User-ID": str(OTHER_ACTOR_ID), "X-User-Role": "viewer"}


async def make_entry(db, cv: int = 7, job: int = 3):
    return await StageTransitionService(db).add_candidate(uuid.UUID(int=cv), uuid.UUID(int=job), ACTOR_ID)


def placement_data(pipeline_id, **overrides) -> PlacementCreate:
    values = {
        "pipeline_id": pipeline_id,
        "start_date": date(2025, 1, 10),
        "job_type": JobType.PERMANENT,
        "salary": Decimal("75000"),
        "fee_percentage": Decimal("20"),
        "fee_value": Decimal("15000"),
    }
    values.update(overrides)
    return PlacementCreate(**values)
