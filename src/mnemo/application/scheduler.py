"""
SM-2 scheduler.

Pure computation module with no I/O: the caller supplies `now` and
persists the returned state.
"""

import logging
from datetime import datetime, timedelta
from types import MappingProxyType

from mnemo.domain.constants import LAPSE_GRADE, MIN_EASE
from mnemo.domain.models import CardState, Quality

logger = logging.getLogger(__name__)

# Quality button -> SM-2 grade (0-5 scale)
QUALITY_GRADES: MappingProxyType[Quality, int] = MappingProxyType(
    {
        Quality.AGAIN: 1,
        Quality.HARD: 3,
        Quality.GOOD: 4,
        Quality.EASY: 5,
    }
)


def quality_to_grade(quality: Quality | str) -> int:
    """Map a quality rating to its SM-2 grade. Raises InvalidQuality if unknown."""
    return QUALITY_GRADES[Quality.parse(quality)]


def update_schedule(prior: CardState, quality: Quality | str, now: datetime) -> CardState:
    """
    Apply one SM-2 review to a card.

    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3.
    A grade below 3 is a lapse: the interval resets to 1 day.

    Args:
        prior: Scheduling state before this review.
        quality: Final (user-confirmed) rating.
        now: Review time; `due_at` is computed from it.

    Returns:
        New CardState with `due_at` set.

    Raises:
        InvalidQuality: If `quality` is not again, hard, good or easy.
    """
    q = quality_to_grade(quality)

    lapses = prior.lapses
    if q < LAPSE_GRADE:
        lapses += 1
        interval = 1.0
    else:
        interval = max(prior.interval_days, 1.0) * prior.ease

    ease = prior.ease + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
    ease = max(ease, MIN_EASE)

    due_at = now + timedelta(days=interval)
    logger.debug(
        f"SM-2 q={q}: ease {prior.ease:.2f}->{ease:.2f}, "
        f"interval {prior.interval_days:.2f}->{interval:.2f}d, lapses={lapses}"
    )
    return CardState(ease=ease, interval_days=interval, lapses=lapses, due_at=due_at)


def is_card_due(state: CardState, now: datetime) -> bool:
    """New cards are always due; scheduled cards once `due_at` has passed."""
    if state.due_at is None:
        return True
    return state.due_at <= now
