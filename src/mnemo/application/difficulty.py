"""
Automatic difficulty inference from response time, answer score and hint usage.

Rules (first match wins):

| Condition                                   | Quality | Confidence |
|---------------------------------------------|---------|------------|
| score < 0.5                                 | again   | 0.9        |
| score < 0.7 OR hint used                    | hard    | 0.8        |
| score >= 0.9 AND time < quick AND no hint   | easy    | 0.85       |
| score >= 0.7 AND time < normal              | good    | 0.8        |
| score >= 0.9 AND time > 30s                 | good    | 0.65       |
| score >= 0.9                                | good    | 0.7        |
| otherwise                                   | good    | 0.6        |

Cards with an interval above 7 days get 10% tighter time thresholds.
The suggestion is advisory; the learner may override it.
"""

import math

from mnemo.application.utils.text import clamp_unit
from mnemo.domain.constants import (
    CORRECT_THRESHOLD,
    NORMAL_RESPONSE_MS,
    PARTIAL_SCORE,
    QUICK_RESPONSE_MS,
    SLOW_RESPONSE_MS,
    WELL_KNOWN_INTERVAL_DAYS,
    WELL_KNOWN_TIME_FACTOR,
    WRONG_SCORE,
)
from mnemo.domain.models import InferenceResult, Quality


def _percent(value: float) -> int:
    return math.floor(value * 100 + 0.5)


def format_time(ms: float) -> str:
    """Human-readable duration: 850ms, 3.0s, 2m, 2m 5s."""
    if ms < 1000:
        return f"{round(ms)}ms"
    seconds = ms / 1000
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    remaining = round(seconds % 60)
    if remaining == 0:
        return f"{minutes}m"
    return f"{minutes}m {remaining}s"


def format_confidence(confidence: float) -> str:
    return f"{_percent(confidence)}%"


def infer_difficulty(
    response_time_ms: float,
    answer_score: float,
    hint_used: bool,
    card_interval: float | None = None,
) -> InferenceResult:
    """
    Suggest a quality rating for one review.

    Args:
        response_time_ms: Time from card shown to answer submitted.
        answer_score: Evaluator score (0-1).
        hint_used: Whether the learner revealed a hint.
        card_interval: Current interval in days, if the card is scheduled.

    Returns:
        InferenceResult; never raises.
    """
    score = clamp_unit(answer_score)
    factor = (
        WELL_KNOWN_TIME_FACTOR
        if card_interval is not None and card_interval > WELL_KNOWN_INTERVAL_DAYS
        else 1.0
    )
    quick_ms = QUICK_RESPONSE_MS * factor
    normal_ms = NORMAL_RESPONSE_MS * factor
    elapsed = format_time(response_time_ms)

    if score < WRONG_SCORE:
        return InferenceResult(
            Quality.AGAIN, 0.9, f"Incorrect answer ({_percent(score)}% match)"
        )

    if score < PARTIAL_SCORE or hint_used:
        reasons = []
        if score < PARTIAL_SCORE:
            reasons.append(f"partial answer ({_percent(score)}% match)")
        if hint_used:
            reasons.append("used hint")
        reasoning = " and ".join(reasons)
        return InferenceResult(Quality.HARD, 0.8, reasoning[0].upper() + reasoning[1:])

    if score >= CORRECT_THRESHOLD and response_time_ms < quick_ms:
        return InferenceResult(Quality.EASY, 0.85, f"Correct answer in {elapsed} without hints")

    if score >= PARTIAL_SCORE and response_time_ms < normal_ms:
        return InferenceResult(Quality.GOOD, 0.8, f"Correct answer in {elapsed}")

    if score >= CORRECT_THRESHOLD:
        # Very slow suggests some struggle
        if response_time_ms > SLOW_RESPONSE_MS:
            return InferenceResult(Quality.GOOD, 0.65, f"Correct but took {elapsed} to answer")
        return InferenceResult(Quality.GOOD, 0.7, f"Correct answer in {elapsed}")

    return InferenceResult(Quality.GOOD, 0.6, f"{_percent(score)}% match in {elapsed}")
