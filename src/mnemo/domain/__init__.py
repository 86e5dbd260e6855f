# Domain Package
from .exceptions import InvalidQuality, JudgeError, MnemoError
from .models import (
    CardState,
    EvaluationResult,
    InferenceResult,
    JudgeRequest,
    JudgeVerdict,
    MatchType,
    Quality,
    SessionEvent,
    Verdict,
)
from .ports import SemanticJudge

__all__ = [
    "CardState",
    "EvaluationResult",
    "InferenceResult",
    "InvalidQuality",
    "JudgeError",
    "JudgeRequest",
    "JudgeVerdict",
    "MatchType",
    "MnemoError",
    "Quality",
    "SemanticJudge",
    "SessionEvent",
    "Verdict",
]
