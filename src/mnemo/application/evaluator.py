"""
Answer evaluator for free-text flashcard responses.

Each accepted answer is compared through a cascade of strategies, in order:
1. Exact match after normalization
2. Full-phrase synonym
3. Word order flexibility (stop words dropped, per-token synonyms)
4. Typo tolerance for short answers
5. Substring / partial credit
6. Synonym word similarity
7. Levenshtein fallback

The first strategy that qualifies decides the candidate's score; the best
candidate wins.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import replace

from mnemo.application.synonyms import (
    are_synonyms,
    get_synonym_similarity,
    tokens_match_any_order,
)
from mnemo.application.utils.text import (
    clamp_unit,
    levenshtein_distance,
    normalize_text,
    tokenize,
    typo_allowance,
)
from mnemo.domain.constants import (
    AI_TIMEOUT,
    AI_UNCERTAIN_HIGH,
    AI_UNCERTAIN_LOW,
    AI_VERDICT_SCORES,
    CLOSE_THRESHOLD,
    CORRECT_THRESHOLD,
    EXACT_SCORE,
    FUZZY_MIN,
    PARTIAL_BASE_SCORE,
    PARTIAL_SPAN,
    SHORT_ANSWER_MAX_WORDS,
    SYNONYM_SCORE,
    SYNONYM_SIMILARITY_MIN,
    TYPO_SCORE,
    WORD_ORDER_SCORE,
)
from mnemo.domain.models import EvaluationResult, JudgeRequest, MatchType, Verdict
from mnemo.domain.ports import SemanticJudge

logger = logging.getLogger(__name__)

NO_ANSWER_FEEDBACK = "No answer provided"


def _within_typo_allowance(response: str, expected: str) -> bool:
    """Short answers may differ by a few edits per word."""
    response_words = tokenize(response)
    expected_words = tokenize(expected)
    if len(response_words) > SHORT_ANSWER_MAX_WORDS or len(expected_words) > SHORT_ANSWER_MAX_WORDS:
        return False
    if len(response_words) != len(expected_words):
        return False
    return all(
        levenshtein_distance(got, want) <= typo_allowance(want)
        for got, want in zip(response_words, expected_words, strict=True)
    )


def _score_candidate(response: str, expected: str) -> tuple[float, MatchType]:
    """Score one accepted answer. First qualifying strategy wins."""
    norm_response = normalize_text(response)
    norm_expected = normalize_text(expected)

    if not norm_response or not norm_expected:
        return 0.0, MatchType.NONE

    if norm_response == norm_expected:
        return EXACT_SCORE, MatchType.EXACT

    if are_synonyms(response, expected):
        return SYNONYM_SCORE, MatchType.SYNONYM

    if tokens_match_any_order(tokenize(norm_response), tokenize(norm_expected)):
        return WORD_ORDER_SCORE, MatchType.WORD_ORDER

    if _within_typo_allowance(norm_response, norm_expected):
        return TYPO_SCORE, MatchType.FUZZY

    max_length = max(len(norm_response), len(norm_expected))
    if norm_expected in norm_response or norm_response in norm_expected:
        overlap = min(len(norm_response), len(norm_expected))
        return PARTIAL_BASE_SCORE + (overlap / max_length) * PARTIAL_SPAN, MatchType.FUZZY

    similarity = get_synonym_similarity(response, expected)
    if similarity >= SYNONYM_SIMILARITY_MIN:
        return similarity, MatchType.SYNONYM

    score = max(0.0, 1 - levenshtein_distance(norm_response, norm_expected) / max_length)
    return score, MatchType.FUZZY if score >= FUZZY_MIN else MatchType.NONE


def _feedback(score: float, match_type: MatchType, expected: str) -> str:
    if score >= CORRECT_THRESHOLD:
        if match_type is MatchType.EXACT:
            return "Correct!"
        return f"Correct! ({match_type.value.replace('_', ' ')} match)"
    if score >= CLOSE_THRESHOLD:
        return f'Close! Expected: "{expected}"'
    return f'Incorrect. Expected: "{expected}"'


def _build_result(
    score: float, match_type: MatchType, expected: str, ai_used: bool = False
) -> EvaluationResult:
    score = clamp_unit(score)
    return EvaluationResult(
        score=score,
        match_type=match_type,
        is_correct=score >= CORRECT_THRESHOLD,
        feedback=_feedback(score, match_type, expected),
        ai_used=ai_used,
    )


def _best_candidate(response: str, expected_answers: Sequence[str]) -> tuple[float, MatchType, str]:
    best_score = 0.0
    best_type = MatchType.NONE
    best_expected = expected_answers[0]
    for expected in expected_answers:
        score, match_type = _score_candidate(response, expected)
        if score > best_score:
            best_score, best_type, best_expected = score, match_type, expected
    return best_score, best_type, best_expected


def evaluate_answer(response: str, expected_answers: Sequence[str]) -> EvaluationResult:
    """
    Grade a free-text response against the card's accepted answers.

    Never raises: empty or unusable input degrades to score 0, match type none.

    Args:
        response: Raw text typed by the learner.
        expected_answers: Accepted answers, in card order.

    Returns:
        EvaluationResult for the best-scoring accepted answer.
    """
    if not response or not response.strip():
        return EvaluationResult(
            score=0.0, match_type=MatchType.NONE, is_correct=False, feedback=NO_ANSWER_FEEDBACK
        )
    if not expected_answers:
        return EvaluationResult(
            score=0.0, match_type=MatchType.NONE, is_correct=False, feedback="Incorrect."
        )

    score, match_type, expected = _best_candidate(response, expected_answers)
    return _build_result(score, match_type, expected)


async def evaluate_answer_async(
    response: str,
    expected_answers: Sequence[str],
    use_ai: bool = False,
    card_context: str | None = None,
    judge: SemanticJudge | None = None,
    timeout: float | None = AI_TIMEOUT,
) -> EvaluationResult:
    """
    Grade a response, asking the semantic judge when the result is uncertain.

    The synchronous cascade always runs first. Only scores in [0.4, 0.9) are
    sent to the judge, and any judge failure or timeout returns the
    synchronous result unchanged.

    Args:
        response: Raw text typed by the learner.
        expected_answers: Accepted answers, in card order.
        use_ai: Opt-in switch for the judge.
        card_context: Optional question text passed to the judge.
        judge: Injected SemanticJudge; None disables the AI path.
        timeout: Seconds allowed for each judge call; None waits indefinitely.
    """
    result = evaluate_answer(response, expected_answers)
    if not use_ai or judge is None:
        return result
    if not (AI_UNCERTAIN_LOW <= result.score < AI_UNCERTAIN_HIGH):
        return result

    request = JudgeRequest(
        expected_answers=tuple(expected_answers),
        response=response,
        context=card_context,
    )
    try:
        if not await asyncio.wait_for(judge.is_available(), timeout):
            logger.debug("Semantic judge unavailable; keeping local evaluation")
            return result
        verdict = await asyncio.wait_for(judge.evaluate(request), timeout)
        outcome = Verdict(verdict.result)
    except Exception as e:
        logger.warning(f"Semantic judge failed, falling back to local evaluation: {e!r}")
        return result

    logger.info(f"Semantic judge verdict {outcome.value} (local score {result.score:.2f})")
    _, _, expected = _best_candidate(response, expected_answers)
    graded = _build_result(AI_VERDICT_SCORES[outcome.value], MatchType.AI, expected, ai_used=True)
    if verdict.reason:
        return replace(graded, feedback=f"{graded.feedback} {verdict.reason}")
    return graded
