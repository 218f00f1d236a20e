import uuid

import pydantic
import pytest

from talent_pipeline.errors import DuplicateEntryError, NotFoundError
from talent_pipeline.models.enums import PipelineStage, Recommendation
from talent_pipeline.models.interview_scorecard import InterviewScorecard
from talent_pipeline.schemas.scorecard import ScorecardCreate, ScorecardUpdate
from talent_pipeline.services.activity_log_service import ActivityLogService
from talent_pipeline.services.scorecard_service import (
    ScorecardService,
    average_score,
    summarize_scorecards,
)

from tests.factories import ACTOR_ID, make_entry


def scorecard(pipeline_id, stage=PipelineStage.INTERVIEW, **ratings) -> ScorecardCreate:
    return ScorecardCreate(pipeline_id=pipeline_id, stage=stage, **ratings)


@pytest.mark.asyncio
async def test_summary_averages_ignore_missing_ratings(db):
    entry = await make_entry(db)
    service = ScorecardService(db)
    await service.add_scorecard(scorecard(entry.id, technical_skills=4, recommendation=Recommendation.HIRE), ACTOR_ID)
    await service.add_scorecard(scorecard(entry.id, technical_skills=5), ACTOR_ID)
    last = await service.add_scorecard(
        scorecard(entry.id, technical_skills=None, communication=3, recommendation=Recommendation.MAYBE),
        ACTOR_ID,
    )

    summary = await service.summarize(entry.id)

    assert summary.count == 3
    assert summary.averages.technical_skills == 4.5
    assert summary.averages.communication == 3.0
    assert summary.averages.cultural_fit is None
    assert summary.recommendations == [Recommendation.HIRE, Recommendation.MAYBE]
    assert summary.latest_scorecard.id == last.id
    assert summary.latest_scorecard.sequence == 3


@pytest.mark.asyncio
async def test_summary_is_none_without_scorecards(db):
    entry = await make_entry(db)

    assert await ScorecardService(db).summarize(entry.id) is None


@pytest.mark.unit
def test_summarize_empty_list():
    assert summarize_scorecards([]) is None


@pytest.mark.asyncio
async def test_add_scorecard_logs_activity(db):
    entry = await make_entry(db)
    service = ScorecardService(db)

    await service.add_scorecard(scorecard(entry.id, recommendation=Recommendation.STRONG_HIRE), ACTOR_ID)
    await service.add_scorecard(scorecard(entry.id, stage=PipelineStage.OFFER), ACTOR_ID)

    timeline = await ActivityLogService(db).timeline(entry.id)
    assert [(r.action, r.note) for r in timeline[:2]] == [
        ("scorecard_added", "Scorecard added for offer: No recommendation yet"),
        ("scorecard_added", "Scorecard added for interview: strong_hire"),
    ]


@pytest.mark.asyncio
async def test_add_scorecard_for_unknown_entry(db):
    missing = uuid.uuid4()
    service = ScorecardService(db)

    with pytest.raises(NotFoundError):
        await service.add_scorecard(scorecard(missing, technical_skills=3), ACTOR_ID)

    assert await service.list_scorecards(missing) == []


@pytest.mark.asyncio
async def test_exists_for_stage_allows_repeats(db):
    entry = await make_entry(db)
    service = ScorecardService(db)
    assert not await service.exists_for_stage(entry.id, PipelineStage.INTERVIEW)

    await service.add_scorecard(scorecard(entry.id), ACTOR_ID)
    await service.add_scorecard(scorecard(entry.id), ACTOR_ID)

    assert await service.exists_for_stage(entry.id, PipelineStage.INTERVIEW)
    assert not await service.exists_for_stage(entry.id, PipelineStage.OFFER)
    assert [card.sequence for card in await service.list_scorecards(entry.id)] == [1, 2]


@pytest.mark.asyncio
async def test_update_and_delete_scorecard(db):
    entry = await make_entry(db)
    service = ScorecardService(db)
    card = await service.add_scorecard(scorecard(entry.id, technical_skills=2, communication=4), ACTOR_ID)

    updated = await service.update_scorecard(card.id, ScorecardUpdate(technical_skills=5, strengths="Clear thinker"))
    assert updated.technical_skills == 5
    assert updated.communication == 4
    assert updated.strengths == "Clear thinker"
    assert updated.sequence == 1

    await service.delete_scorecard(card.id)
    with pytest.raises(NotFoundError):
        await service.get_scorecard(card.id)


@pytest.mark.unit
def test_average_score_of_single_scorecard():
    card = InterviewScorecard(technical_skills=4, communication=2, cultural_fit=None)
    assert average_score(card) == 3.0
    assert average_score(InterviewScorecard()) is None


@pytest.mark.unit
def test_ratings_outside_one_to_five_are_rejected():
    with pytest.raises(pydantic.ValidationError):
        ScorecardCreate(pipeline_id=uuid.uuid4(), stage=PipelineStage.INTERVIEW, technical_skills=6)
    with pytest.raises(pydantic.ValidationError):
        ScorecardCreate(pipeline_id=uuid.uuid4(), stage="phone_screen")


@pytest.mark.unit
@pytest.mark.parametrize("field", ["stage", "interview_type", "is_client_feedback"])
def test_update_rejects_null_for_required_fields(field):
    with pytest.raises(pydantic.ValidationError):
        ScorecardUpdate(**{field: None})


@pytest.mark.asyncio
async def test_update_can_clear_a_rating(db):
    entry = await make_entry(db)
    service = ScorecardService(db)
    card = await service.add_scorecard(scorecard(entry.id, technical_skills=4), ACTOR_ID)

    updated = await service.update_scorecard(card.id, ScorecardUpdate(technical_skills=None))

    assert updated.technical_skills is None
    assert updated.stage == "interview"


@pytest.mark.asyncio
async def test_scorecards_racing_for_one_sequence(db):
    entry = await make_entry(db)
    entry_id = entry.id
    service = ScorecardService(db)
    first_id = (await service.add_scorecard(scorecard(entry_id), ACTOR_ID)).id

    async def stale_sequence(pipeline_id):
        return 1

    service.repository.next_sequence = stale_sequence

    with pytest.raises(DuplicateEntryError) as exc_info:
        await service.add_scorecard(scorecard(entry_id), ACTOR_ID)

    assert exc_info.value.status_code == 409
    assert [card.id for card in await service.list_scorecards(entry_id)] == [first_id]
