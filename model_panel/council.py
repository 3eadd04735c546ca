"""Council query: same prompt to many models in parallel."""

import asyncio
import logging
import time

from model_panel.context import PanelContext
from model_panel.models import CouncilResult, ModelResponse
from model_panel.query import elapsed_ms, query_model

logger = logging.getLogger(__name__)


async def query_models(
    ctx: PanelContext,
    model_ids: list[str] | None,
    prompt: str,
    system_prompt: str | None = None,
) -> CouncilResult:
    """Send ``prompt`` to every model at once and wait for all of them.

    Every query is submitted immediately; the context's gate decides how many
    actually run. A slow or failing model never cancels the others, and this
    call never raises for a model failure, even when all of them fail.

    Args:
        ctx: Orchestration context.
        model_ids: Models to query; None means the context's default panel.
        prompt: Prompt shared by all models.
        system_prompt: Optional shared system prompt.

    Returns:
        CouncilResult with successes and failures in completion order.

    Raises:
        ValueError: If the model list is empty.
    """
    models = list(model_ids) if model_ids is not None else list(ctx.default_models)
    if not models:
        raise ValueError("At least one model is required")

    logger.info("Council query to %d models", len(models))
    start = time.monotonic()

    result = CouncilResult()
    tasks = [asyncio.ensure_future(query_model(ctx, m, prompt, system_prompt)) for m in models]
    for next_done in asyncio.as_completed(tasks):
        outcome = await next_done
        if isinstance(outcome, ModelResponse):
            result.successes.append(outcome)
        else:
            result.failures.append(outcome)

    result.total_latency_ms = elapsed_ms(start)
    result.success_count = len(result.successes)

    logger.info(
        "Council complete: %d/%d models succeeded in %dms",
        result.success_count,
        len(models),
        result.total_latency_ms,
    )
    if result.failures:
        logger.warning("Failed models: %s", ", ".join(result.failed_models))

    return result
