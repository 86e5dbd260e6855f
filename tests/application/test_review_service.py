from datetime import timedelta

import pytest

from mnemo.application.config import AppConfig
from mnemo.application.difficulty import infer_difficulty
from mnemo.application.evaluator import evaluate_answer
from mnemo.application.review_service import Assessment, ReviewService
from mnemo.domain.exceptions import InvalidQuality
from mnemo.domain.models import CardState, JudgeVerdict, MatchType, Quality, Verdict


@pytest.fixture
def service():
    return ReviewService(config=AppConfig(use_ai=False))


@pytest.mark.asyncio
async def test_assess_combines_evaluation_and_inference(service):
    assessment = await service.assess(
        "Paris", ["Paris"], response_time_ms=3000, hint_used=False, card=CardState()
    )
    assert assessment.evaluation.match_type is MatchType.EXACT
    assert assessment.inference.quality is Quality.EASY


@pytest.mark.asyncio
async def test_assess_uses_interval_of_scheduled_cards(service, now):
    card = CardState(ease=2.5, interval_days=12, due_at=now)
    assessment = await service.assess(
        "Paris", ["Paris"], response_time_ms=4800, hint_used=False, card=card
    )
    # 4.8s misses the tightened 4.5s threshold for mature cards
    assert assessment.inference.quality is Quality.GOOD


@pytest.mark.asyncio
async def test_assess_consults_judge_only_when_enabled(make_judge):
    judge = make_judge(JudgeVerdict(Verdict.YES, "ok"))

    local = ReviewService(judge=judge, config=AppConfig(use_ai=False))
    result = await local.assess("United", ["United States"], 3000, False, CardState())
    assert result.evaluation.ai_used is False
    assert judge.requests == []

    assisted = ReviewService(judge=judge, config=AppConfig(use_ai=True))
    result = await assisted.assess(
        "United", ["United States"], 3000, False, CardState(), card_context="Country?"
    )
    assert result.evaluation.ai_used is True
    assert result.inference.quality is Quality.EASY
    assert judge.requests[0].context == "Country?"


@pytest.mark.asyncio
async def test_record_accepting_suggestion(service, now):
    card = CardState()
    assessment = await service.assess("Paris", ["Paris"], 9000, False, card)

    outcome = service.record(
        card,
        assessment,
        response="Paris",
        final_quality=assessment.inference.quality,
        now=now,
        response_time_ms=9000,
        hint_used=False,
    )

    assert outcome.card.interval_days == pytest.approx(2.5)
    assert outcome.card.due_at == now + timedelta(days=2.5)
    assert outcome.event.quality is Quality.GOOD
    assert outcome.event.inferred_quality is Quality.GOOD
    assert outcome.event.user_overrode is False
    assert outcome.event.next_due == outcome.card.due_at
    assert outcome.event.score == 1.0


@pytest.mark.asyncio
async def test_record_override_is_flagged(service, now):
    card = CardState(ease=2.5, interval_days=10)
    assessment = await service.assess("Paris", ["Paris"], 2000, False, card)
    assert assessment.inference.quality is Quality.EASY

    outcome = service.record(card, assessment, "Paris", "again", now, 2000, False)

    assert outcome.event.user_overrode is True
    assert outcome.event.quality is Quality.AGAIN
    assert outcome.event.inferred_quality is Quality.EASY
    assert outcome.card.lapses == 1
    assert outcome.card.interval_days == 1


def test_record_rejects_unknown_quality(service, now):
    assessment = Assessment(
        evaluation=evaluate_answer("x", ["x"]),
        inference=infer_difficulty(1000, 1.0, False),
    )
    with pytest.raises(InvalidQuality):
        service.record(CardState(), assessment, "x", "perfect", now, 1000, False)
