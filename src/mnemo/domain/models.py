"""
Domain models for grading and scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .constants import DEFAULT_EASE, DEFAULT_INTERVAL_DAYS
from .exceptions import InvalidQuality


class Quality(str, Enum):
    """Recall-quality button pressed by the learner."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def parse(cls, value: "Quality | str") -> "Quality":
        """Coerce a member or a case-insensitive name, rejecting anything else."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidQuality(value)


class MatchType(str, Enum):
    """Which comparison strategy produced an evaluation score."""

    EXACT = "exact"
    SYNONYM = "synonym"
    WORD_ORDER = "word_order"
    FUZZY = "fuzzy"
    AI = "ai"
    NONE = "none"


class Verdict(str, Enum):
    YES = "YES"
    PARTIAL = "PARTIAL"
    NO = "NO"


@dataclass(frozen=True)
class CardState:
    """
    SM-2 scheduling state of a single card.

    Attributes:
        ease: Interval multiplier, never below 1.3.
        interval_days: Days until the next review (fractional allowed).
        lapses: Number of failed recalls so far.
        due_at: Next review time; None while the card is new.
    """

    ease: float = DEFAULT_EASE
    interval_days: float = DEFAULT_INTERVAL_DAYS
    lapses: int = 0
    due_at: datetime | None = None

    @property
    def is_new(self) -> bool:
        return self.due_at is None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "CardState":
        """Build a state from a storage row, defaulting missing or null columns."""
        ease = row.get("ease")
        interval = row.get("interval_days")
        lapses = row.get("lapses")
        due_at = row.get("due_at")
        if isinstance(due_at, str):
            due_at = datetime.fromisoformat(due_at.replace("Z", "+00:00"))
        return cls(
            ease=float(ease) if ease is not None else DEFAULT_EASE,
            interval_days=float(interval) if interval is not None else DEFAULT_INTERVAL_DAYS,
            lapses=int(lapses) if lapses is not None else 0,
            due_at=due_at,
        )


@dataclass(frozen=True)
class EvaluationResult:
    """
    Outcome of grading one free-text answer.

    Attributes:
        score: Correctness in [0, 1].
        match_type: Strategy that produced the score.
        is_correct: True when score >= 0.9.
        feedback: Display string for the learner.
        ai_used: True when the semantic judge decided the score.
    """

    score: float
    match_type: MatchType
    is_correct: bool
    feedback: str
    ai_used: bool = False


@dataclass(frozen=True)
class InferenceResult:
    """Suggested quality rating with the inferencer's confidence and explanation."""

    quality: Quality
    confidence: float
    reasoning: str


@dataclass(frozen=True)
class JudgeRequest:
    expected_answers: tuple[str, ...]
    response: str
    context: str | None = None


@dataclass(frozen=True)
class JudgeVerdict:
    result: Verdict
    reason: str = ""


@dataclass(frozen=True)
class SessionEvent:
    """
    One answered card, as handed to storage by the caller.

    `score` is always on the 0-1 scale; conversion for legacy 0-100
    columns happens at the storage boundary.
    """

    response: str
    quality: Quality
    score: float
    response_time_ms: int
    hint_used: bool
    inferred_quality: Quality
    inference_confidence: float
    user_overrode: bool
    next_due: datetime

    def as_record(self) -> dict[str, Any]:
        return {
            "response": self.response,
            "quality": self.quality.value,
            "score": self.score,
            "response_time_ms": self.response_time_ms,
            "hint_used": self.hint_used,
            "inferred_quality": self.inferred_quality.value,
            "inference_confidence": self.inference_confidence,
            "user_overrode": self.user_overrode,
            "next_due": self.next_due.isoformat(),
        }
