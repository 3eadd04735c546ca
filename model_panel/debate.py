"""Debate orchestration: two models argue a proposition over sequential rounds."""

import logging
import time
from collections.abc import Callable

from model_panel.context import PanelContext
from model_panel.models import DebateResult, DebateRound, ModelError
from model_panel.query import elapsed_ms, query_model

logger = logging.getLogger(__name__)

AFFIRMATIVE = "affirmative"
NEGATIVE = "negative"


class DebateError(Exception):
    """Raised when one side fails a turn; the whole debate is abandoned."""

    def __init__(self, side: str, round_number: int, message: str) -> None:
        self.side = side
        self.round_number = round_number
        super().__init__(f"{side.capitalize()} model failed in round {round_number}: {message}")


def _format_turn(round_number: int, side: str, model_id: str, text: str) -> str:
    return f"Round {round_number} - {side.capitalize()} ({model_id}):\n{text}"


def _append(transcript: str, turn: str) -> str:
    return f"{transcript}\n\n{turn}" if transcript else turn


async def run_debate(
    ctx: PanelContext,
    topic: str,
    affirmative_model: str,
    negative_model: str,
    rounds: int | None = None,
    on_round_complete: Callable[[DebateRound], None] | None = None,
) -> DebateResult:
    """Run a full debate, affirmative first in every round.

    Each turn sees the transcript of every earlier turn, so turns run strictly
    one after another. Any failed turn aborts the debate; completed rounds are
    discarded rather than returned.

    Args:
        ctx: Orchestration context.
        topic: The proposition under debate.
        affirmative_model: Model arguing FOR.
        negative_model: Model arguing AGAINST.
        rounds: Number of rounds; defaults to the context's default.
        on_round_complete: Optional callback invoked after each round completes.

    Returns:
        DebateResult with one DebateRound per round, in order.

    Raises:
        ValueError: If ``rounds`` is outside 1..max_debate_rounds.
        DebateError: If either model fails a turn.
    """
    num_rounds = rounds if rounds is not None else ctx.default_debate_rounds
    if not 1 <= num_rounds <= ctx.max_debate_rounds:
        raise ValueError(f"rounds must be between 1 and {ctx.max_debate_rounds}, got {num_rounds}")

    prompts = ctx.prompts
    start = time.monotonic()
    completed: list[DebateRound] = []
    transcript = ""

    for round_num in range(1, num_rounds + 1):
        logger.info("Debate round %d/%d", round_num, num_rounds)

        if round_num == 1:
            affirmative_prompt = prompts.debate_affirmative_opening.format(
                topic=topic, round=round_num, rounds=num_rounds,
            )
        else:
            affirmative_prompt = prompts.debate_affirmative_rebuttal.format(
                topic=topic, round=round_num, rounds=num_rounds, transcript=transcript,
            )

        affirmative = await query_model(ctx, affirmative_model, affirmative_prompt)
        if isinstance(affirmative, ModelError):
            logger.warning("Debate aborted: affirmative failed in round %d", round_num)
            raise DebateError(AFFIRMATIVE, round_num, affirmative.error)
        transcript = _append(
            transcript, _format_turn(round_num, AFFIRMATIVE, affirmative_model, affirmative.text)
        )

        negative_prompt = prompts.debate_negative.format(
            topic=topic, round=round_num, rounds=num_rounds, transcript=transcript,
        )
        negative = await query_model(ctx, negative_model, negative_prompt)
        if isinstance(negative, ModelError):
            logger.warning("Debate aborted: negative failed in round %d", round_num)
            raise DebateError(NEGATIVE, round_num, negative.error)
        transcript = _append(
            transcript, _format_turn(round_num, NEGATIVE, negative_model, negative.text)
        )

        current_round = DebateRound(
            round_number=round_num,
            affirmative=affirmative.text,
            negative=negative.text,
        )
        completed.append(current_round)

        if on_round_complete:
            on_round_complete(current_round)

    total = elapsed_ms(start)
    logger.info("Debate complete: %d rounds in %dms", len(completed), total)

    return DebateResult(
        topic=topic,
        affirmative_model=affirmative_model,
        negative_model=negative_model,
        rounds=completed,
        total_exchanges=2 * len(completed),
        total_latency_ms=total,
    )
