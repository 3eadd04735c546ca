"""Critique: one model reviews a response and returns structured feedback."""

import logging
from typing import Any

from model_panel.context import PanelContext
from model_panel.models import Critique, CritiqueResult, ModelError
from model_panel.parsing import extract_json_object
from model_panel.query import query_model

logger = logging.getLogger(__name__)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def build_critique_prompt(
    template: str,
    original_prompt: str,
    response_text: str,
    aspects: list[str] | None = None,
) -> str:
    aspects_clause = ""
    if aspects:
        aspects_clause = f"\nFocus particularly on these aspects: {', '.join(aspects)}\n"
    return template.format(
        original_prompt=original_prompt,
        response=response_text,
        aspects_clause=aspects_clause,
    )


def parse_critique(text: str) -> Critique:
    """Map model output onto a Critique, degrading to the raw text on failure."""
    parsed = extract_json_object(text)
    if parsed is None:
        logger.debug("Critique output was not JSON, keeping raw text")
        return Critique(overall_assessment=text)

    assessment = parsed.get("overallAssessment", parsed.get("overall_assessment"))
    return Critique(
        strengths=_string_list(parsed.get("strengths")),
        weaknesses=_string_list(parsed.get("weaknesses")),
        suggestions=_string_list(parsed.get("suggestions")),
        overall_assessment=assessment if isinstance(assessment, str) and assessment else text,
    )


async def run_critique(
    ctx: PanelContext,
    original_prompt: str,
    response_text: str,
    critic_model: str,
    aspects: list[str] | None = None,
) -> CritiqueResult:
    """Ask ``critic_model`` to critique ``response_text``. Never raises.

    A failed query comes back with ``error`` set and an empty critique.
    """
    prompt = build_critique_prompt(ctx.prompts.critique, original_prompt, response_text, aspects)
    result = await query_model(ctx, critic_model, prompt)

    if isinstance(result, ModelError):
        logger.warning("Critique by %s failed: %s", critic_model, result.error)
        return CritiqueResult(
            critique=Critique(),
            critic_model=critic_model,
            latency_ms=0,
            error=result.error,
        )

    return CritiqueResult(
        critique=parse_critique(result.text),
        critic_model=critic_model,
        latency_ms=result.latency_ms,
        actual_model=result.actual_model,
    )
