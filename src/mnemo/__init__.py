"""mnemo: answer grading, difficulty inference and SM-2 scheduling for flashcards."""

from mnemo.application.difficulty import infer_difficulty
from mnemo.application.evaluator import evaluate_answer, evaluate_answer_async
from mnemo.application.scheduler import update_schedule
from mnemo.application.synonyms import (
    are_phrase_synonyms,
    are_synonyms,
    get_synonym_similarity,
)
from mnemo.consts import VERSION

__version__ = VERSION

__all__ = [
    "are_phrase_synonyms",
    "are_synonyms",
    "evaluate_answer",
    "evaluate_answer_async",
    "get_synonym_similarity",
    "infer_difficulty",
    "update_schedule",
]
