"""
Metrics calculator for summarizing a study session.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from mnemo.application.utils.text import clamp_unit
from mnemo.domain.constants import CORRECT_THRESHOLD
from mnemo.domain.models import Quality, SessionEvent


def normalize_score(value: float | int | None) -> float:
    """
    Bring a stored score onto the canonical 0-1 scale.

    Older rows hold percentages (0-100); anything above 1 is treated as one.
    """
    if value is None:
        return 0.0
    value = float(value)
    if value > 1:
        value = value / 100
    return clamp_unit(value)


@dataclass
class SessionStats:
    """
    Summary of one study session.
    """

    total_cards: int
    correct_answers: int
    accuracy: float  # correct / total
    average_score: float
    override_rate: float | None  # share of reviews where the suggestion was rejected
    average_response_time_ms: float | None
    quality_counts: dict[Quality, int]


class MetricsCalculator:
    """
    Computes session summaries from SessionEvent objects.

    Stateless and side-effect free.
    """

    def summarize(self, events: Iterable[SessionEvent]) -> SessionStats:
        """
        Summarize a session's events.
        """
        events = list(events)
        total = len(events)
        counts = {q: 0 for q in Quality}
        for event in events:
            counts[event.quality] += 1

        if total == 0:
            return SessionStats(
                total_cards=0,
                correct_answers=0,
                accuracy=0.0,
                average_score=0.0,
                override_rate=None,
                average_response_time_ms=None,
                quality_counts=counts,
            )

        scores = [normalize_score(e.score) for e in events]
        correct = sum(1 for s in scores if s >= CORRECT_THRESHOLD)

        return SessionStats(
            total_cards=total,
            correct_answers=correct,
            accuracy=correct / total,
            average_score=sum(scores) / total,
            override_rate=self._compute_override_rate(events),
            average_response_time_ms=sum(e.response_time_ms for e in events) / total,
            quality_counts=counts,
        )

    def _compute_override_rate(self, events: list[SessionEvent]) -> float | None:
        """
        Share of reviews where the learner rejected the inferred quality.

        A high rate suggests the inference thresholds do not fit this learner.
        """
        if not events:
            return None
        return sum(1 for e in events if e.user_overrode) / len(events)
