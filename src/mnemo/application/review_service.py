"""
Review Service: application layer orchestrator.

Runs one answer submission through the engine:
response -> evaluator -> difficulty inference -> (learner confirms) -> SM-2.
Storage is left to the caller: the service only returns the new card state
and the session event to persist.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from mnemo.application.config import AppConfig
from mnemo.application.difficulty import infer_difficulty
from mnemo.application.evaluator import evaluate_answer_async
from mnemo.application.scheduler import update_schedule
from mnemo.domain.models import (
    CardState,
    EvaluationResult,
    InferenceResult,
    Quality,
    SessionEvent,
)
from mnemo.domain.ports import SemanticJudge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assessment:
    """Evaluator and inferencer output for one answer, before the learner confirms."""

    evaluation: EvaluationResult
    inference: InferenceResult


@dataclass(frozen=True)
class ReviewOutcome:
    """What the caller persists: the card's new schedule and the session event."""

    card: CardState
    event: SessionEvent


class ReviewService:
    """
    Application service composing the grading and scheduling components.

    Depends on the SemanticJudge abstraction; pass None to stay fully local.
    """

    def __init__(
        self,
        judge: SemanticJudge | None = None,
        config: AppConfig | None = None,
    ):
        """
        Args:
            judge: Optional semantic judge for uncertain answers.
            config: Settings; defaults are used if not provided.
        """
        self._judge = judge
        self._config = config or AppConfig()

    async def assess(
        self,
        response: str,
        expected_answers: Sequence[str],
        response_time_ms: int,
        hint_used: bool,
        card: CardState,
        card_context: str | None = None,
    ) -> Assessment:
        """
        Grade an answer and suggest a quality rating.

        The suggestion is advisory; pass the learner's final choice to `record`.
        """
        evaluation = await evaluate_answer_async(
            response,
            expected_answers,
            use_ai=self._config.use_ai,
            card_context=card_context,
            judge=self._judge,
            timeout=self._config.ai_timeout,
        )
        inference = infer_difficulty(
            response_time_ms=response_time_ms,
            answer_score=evaluation.score,
            hint_used=hint_used,
            card_interval=None if card.is_new else card.interval_days,
        )
        return Assessment(evaluation=evaluation, inference=inference)

    def record(
        self,
        card: CardState,
        assessment: Assessment,
        response: str,
        final_quality: Quality | str,
        now: datetime,
        response_time_ms: int,
        hint_used: bool,
    ) -> ReviewOutcome:
        """
        Schedule the card with the learner's final rating and build the session event.

        Raises:
            InvalidQuality: If `final_quality` is not a known rating.
        """
        quality = Quality.parse(final_quality)
        updated = update_schedule(card, quality, now)
        overrode = quality is not assessment.inference.quality

        if overrode:
            logger.info(
                f"Learner chose {quality.value} over suggested "
                f"{assessment.inference.quality.value}"
            )

        event = SessionEvent(
            response=response,
            quality=quality,
            score=assessment.evaluation.score,
            response_time_ms=response_time_ms,
            hint_used=hint_used,
            inferred_quality=assessment.inference.quality,
            inference_confidence=assessment.inference.confidence,
            user_overrode=overrode,
            next_due=updated.due_at,
        )
        return ReviewOutcome(card=updated, event=event)
