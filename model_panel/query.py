"""Single gated model query that always returns a result record."""

import asyncio
import logging
import time

from model_panel.context import PanelContext
from model_panel.models import ModelError, ModelResponse, QueryResult
from model_panel.resolver import ResolutionError

logger = logging.getLogger(__name__)


def elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


async def query_model(
    ctx: PanelContext,
    model_id: str,
    prompt: str,
    system_prompt: str | None = None,
) -> QueryResult:
    """Query one model under the context's concurrency gate.

    Never raises: resolution errors, timeouts and provider failures all come
    back as ModelError. Latency covers queueing at the gate plus the call.
    """
    start = time.monotonic()

    try:
        resolved = ctx.resolver.resolve(model_id)
    except ResolutionError as exc:
        logger.warning("Cannot resolve %s: %s", model_id, exc)
        return ModelError(model=model_id, error=str(exc))
    except Exception as exc:
        # Client construction happens on first resolve
        logger.warning("Cannot create client for %s: %s", model_id, exc)
        return ModelError(model=model_id, error=str(exc) or type(exc).__name__)

    timeout_sec = ctx.request_timeout_ms / 1000
    try:
        async with ctx.gate.permit():
            completion = await asyncio.wait_for(
                resolved.generate(prompt, system_prompt),
                timeout=timeout_sec,
            )
    except TimeoutError:
        logger.warning("Model %s timed out after %dms", model_id, ctx.request_timeout_ms)
        return ModelError(model=model_id, error=f"Request timed out after {ctx.request_timeout_ms}ms")
    except Exception as exc:
        logger.warning("Model %s failed: %s", model_id, exc)
        return ModelError(model=model_id, error=str(exc) or type(exc).__name__)

    latency = elapsed_ms(start)
    logger.info("Model %s answered in %dms", model_id, latency)

    return ModelResponse(
        model=model_id,
        text=completion.text,
        latency_ms=latency,
        actual_model=completion.actual_model,
    )
