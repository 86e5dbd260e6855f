"""mnemo CLI: grade answers, infer difficulty and run SM-2 from the shell."""

import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Annotated

import typer

from mnemo.application.config import resolve_config
from mnemo.domain.exceptions import InvalidQuality
from mnemo.domain.models import CardState

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="mnemo: answer grading and spaced-repetition scheduling for flashcards.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage mnemo configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_LEVELS = {0: logging.ERROR, 1: logging.WARNING, 2: logging.INFO}


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 1,
):
    """Global settings for mnemo."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.getLogger("mnemo").setLevel(_LEVELS.get(verbose, logging.DEBUG))


def _parse_now(now: str | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    try:
        return datetime.fromisoformat(now)
    except ValueError as e:
        raise typer.BadParameter(f"Not an ISO-8601 timestamp: {now}") from e


def _state_dict(state: CardState) -> dict:
    return {
        "ease": round(state.ease, 4),
        "interval_days": round(state.interval_days, 4),
        "lapses": state.lapses,
        "due_at": state.due_at.isoformat() if state.due_at else None,
    }


# ---------------------------------------------------------------------------
# Engine commands
# ---------------------------------------------------------------------------


@app.command()
def evaluate(
    response: Annotated[str, typer.Argument(help="The learner's answer.")],
    expected: Annotated[
        list[str], typer.Option("--expected", "-e", help="Accepted answer. Repeatable.")
    ],
    ai: Annotated[
        bool, typer.Option("--ai/--no-ai", help="Ask the semantic judge on uncertain scores.")
    ] = False,
    context: Annotated[
        str | None, typer.Option(help="Question text passed to the semantic judge.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """[bold green]Grade[/bold green] an answer against the accepted answers."""
    from mnemo.application.evaluator import evaluate_answer_async
    from mnemo.application.factory import get_semantic_judge

    config = resolve_config({"use_ai": ai or None})
    judge = get_semantic_judge(config) if config.use_ai else None

    result = asyncio.run(
        evaluate_answer_async(
            response,
            expected,
            use_ai=config.use_ai,
            card_context=context,
            judge=judge,
            timeout=config.ai_timeout,
        )
    )

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "score": round(result.score, 4),
                    "match_type": result.match_type.value,
                    "is_correct": result.is_correct,
                    "feedback": result.feedback,
                    "ai_used": result.ai_used,
                },
                indent=2,
            )
        )
        return

    color = "green" if result.is_correct else ("yellow" if result.score >= 0.6 else "red")
    typer.secho(result.feedback, fg=color)
    typer.echo(f"Score: {result.score:.2f}  Match: {result.match_type.value}")


@app.command()
def infer(
    time_ms: Annotated[int, typer.Option("--time-ms", help="Response time in milliseconds.")],
    score: Annotated[float, typer.Option(help="Evaluator score (0-1).")],
    hint: Annotated[bool, typer.Option("--hint", help="A hint was used.")] = False,
    interval: Annotated[
        float | None, typer.Option(help="Current card interval in days.")
    ] = None,
):
    """Suggest a quality rating from score, time and hint usage."""
    from mnemo.application.difficulty import format_confidence, infer_difficulty

    result = infer_difficulty(
        response_time_ms=time_ms, answer_score=score, hint_used=hint, card_interval=interval
    )
    typer.echo(f"{result.quality.value} ({format_confidence(result.confidence)})")
    typer.echo(result.reasoning)


@app.command()
def schedule(
    quality: Annotated[str, typer.Argument(help="again, hard, good or easy.")],
    ease: Annotated[float, typer.Option(help="Prior ease factor.")] = 2.5,
    interval: Annotated[float, typer.Option(help="Prior interval in days.")] = 1.0,
    lapses: Annotated[int, typer.Option(help="Prior lapse count.")] = 0,
    now: Annotated[
        str | None, typer.Option(help="Review time (ISO-8601). Defaults to now, UTC.")
    ] = None,
):
    """Apply one SM-2 review and print the new card state as JSON."""
    from mnemo.application.scheduler import update_schedule

    prior = CardState(ease=ease, interval_days=interval, lapses=lapses)
    try:
        updated = update_schedule(prior, quality, _parse_now(now))
    except InvalidQuality as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(2) from e

    typer.echo(json.dumps(_state_dict(updated), indent=2))


@app.command()
def review(
    response: Annotated[str, typer.Argument(help="The learner's answer.")],
    expected: Annotated[
        list[str], typer.Option("--expected", "-e", help="Accepted answer. Repeatable.")
    ],
    time_ms: Annotated[int, typer.Option("--time-ms", help="Response time in milliseconds.")],
    hint: Annotated[bool, typer.Option("--hint", help="A hint was used.")] = False,
    quality: Annotated[
        str | None,
        typer.Option(help="Final rating. Defaults to the inferred suggestion."),
    ] = None,
    ease: Annotated[float, typer.Option(help="Prior ease factor.")] = 2.5,
    interval: Annotated[float, typer.Option(help="Prior interval in days.")] = 1.0,
    lapses: Annotated[int, typer.Option(help="Prior lapse count.")] = 0,
    new: Annotated[bool, typer.Option("--new", help="Treat the card as never reviewed.")] = False,
    now: Annotated[
        str | None, typer.Option(help="Review time (ISO-8601). Defaults to now, UTC.")
    ] = None,
):
    """Run the full pipeline and print the card state and session event as JSON."""
    from mnemo.application.factory import get_semantic_judge
    from mnemo.application.review_service import ReviewService

    config = resolve_config()
    when = _parse_now(now)
    card = CardState(
        ease=ease,
        interval_days=interval,
        lapses=lapses,
        due_at=None if new else when,
    )
    service = ReviewService(judge=get_semantic_judge(config), config=config)

    assessment = asyncio.run(
        service.assess(response, expected, response_time_ms=time_ms, hint_used=hint, card=card)
    )
    try:
        outcome = service.record(
            card,
            assessment,
            response=response,
            final_quality=quality or assessment.inference.quality,
            now=when,
            response_time_ms=time_ms,
            hint_used=hint,
        )
    except InvalidQuality as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(2) from e

    typer.echo(
        json.dumps(
            {
                "feedback": assessment.evaluation.feedback,
                "reasoning": assessment.inference.reasoning,
                "card": _state_dict(outcome.card),
                "event": outcome.event.as_record(),
            },
            indent=2,
        )
    )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration (API key masked)."""
    config = resolve_config()
    d = config.model_dump()
    if d.get("ai_api_key"):
        d["ai_api_key"] = "***"
    typer.echo(json.dumps(d, indent=2))
