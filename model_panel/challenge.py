"""Challenge: several models stress-test a proposed thought in parallel."""

import logging
from typing import Any

from model_panel.context import PanelContext
from model_panel.council import query_models
from model_panel.models import (
    Challenge,
    ChallengeResult,
    ChallengeSummary,
    ChallengeType,
    ModelResponse,
    Severity,
)
from model_panel.parsing import extract_json_object

logger = logging.getLogger(__name__)

CHALLENGE_DESCRIPTIONS: dict[ChallengeType, str] = {
    ChallengeType.LOGICAL: "logical flaws, contradictions or invalid inferences",
    ChallengeType.FACTUAL: "factual errors or unsupported claims",
    ChallengeType.COMPLETENESS: "missing considerations or gaps in coverage",
    ChallengeType.EDGE_CASES: "edge cases and boundary conditions where it breaks down",
    ChallengeType.ALTERNATIVES: "better alternative approaches that were overlooked",
}


def _normalize(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower().replace("-", "_").replace(" ", "_")


def resolve_challenge_types(names: list[str] | None) -> list[ChallengeType]:
    """Turn requested type names into ChallengeTypes; None means all of them.

    Raises:
        ValueError: If a name is not a known challenge type.
    """
    if not names:
        return list(ChallengeType)
    resolved: list[ChallengeType] = []
    for name in names:
        try:
            challenge_type = ChallengeType(_normalize(name))
        except ValueError:
            valid = ", ".join(t.value for t in ChallengeType)
            raise ValueError(f"Unknown challenge type '{name}'. Valid types: {valid}") from None
        if challenge_type not in resolved:
            resolved.append(challenge_type)
    return resolved


def build_challenge_prompt(
    template: str,
    proposed_thought: str,
    context: str | None,
    challenge_types: list[ChallengeType],
) -> str:
    context_clause = f"\nContext:\n\"{context}\"\n" if context else ""
    type_lines = "\n".join(f"- {t.value}: {CHALLENGE_DESCRIPTIONS[t]}" for t in challenge_types)
    return template.format(
        proposed_thought=proposed_thought,
        context_clause=context_clause,
        challenge_types=type_lines,
        type_names=", ".join(t.value for t in challenge_types),
    )


def _parse_entry(entry: Any, response: ModelResponse) -> Challenge | None:
    if not isinstance(entry, dict):
        return None

    raw_type = entry.get("type", entry.get("challengeType", entry.get("challenge_type")))
    text = entry.get("challenge")
    try:
        challenge_type = ChallengeType(_normalize(raw_type))
        severity = Severity(_normalize(entry.get("severity")))
    except ValueError:
        return None
    if not isinstance(text, str) or not text.strip():
        return None

    reasoning = entry.get("reasoning")
    return Challenge(
        model=response.model,
        challenge_type=challenge_type,
        challenge=text.strip(),
        severity=severity,
        reasoning=reasoning.strip() if isinstance(reasoning, str) else "",
        latency_ms=response.latency_ms,
        actual_model=response.actual_model,
    )


def parse_challenges(response: ModelResponse) -> list[Challenge]:
    """Extract well-formed challenges from one model's reply.

    Unparseable output yields no challenges; malformed entries are skipped
    one by one.
    """
    parsed = extract_json_object(response.text)
    if parsed is None or not isinstance(parsed.get("challenges"), list):
        logger.debug("No parseable challenges from %s", response.model)
        return []

    entries = parsed["challenges"]
    challenges = [c for c in (_parse_entry(e, response) for e in entries) if c is not None]
    dropped = len(entries) - len(challenges)
    if dropped:
        logger.debug("Dropped %d malformed challenges from %s", dropped, response.model)
    return challenges


def summarize(challenges: list[Challenge]) -> ChallengeSummary:
    by_severity = {s.value: 0 for s in Severity}
    by_type: dict[str, int] = {}
    for c in challenges:
        by_severity[c.severity.value] += 1
        by_type[c.challenge_type.value] = by_type.get(c.challenge_type.value, 0) + 1
    return ChallengeSummary(
        total_challenges=len(challenges),
        by_severity=by_severity,
        by_type=by_type,
    )


async def run_challenge(
    ctx: PanelContext,
    proposed_thought: str,
    context: str | None = None,
    challenger_models: list[str] | None = None,
    challenge_types: list[str] | None = None,
) -> ChallengeResult:
    """Have each challenger model attack ``proposed_thought`` independently.

    Raises:
        ValueError: For unknown challenge types or an empty model list.
    """
    types = resolve_challenge_types(challenge_types)
    models = list(challenger_models) if challenger_models is not None else list(ctx.default_challengers)
    prompt = build_challenge_prompt(ctx.prompts.challenge, proposed_thought, context, types)

    council = await query_models(ctx, models, prompt)

    challenges: list[Challenge] = []
    for response in council.successes:
        challenges.extend(parse_challenges(response))

    logger.info(
        "Challenge complete: %d challenges from %d/%d models",
        len(challenges), council.success_count, len(models),
    )

    return ChallengeResult(
        proposed_thought=proposed_thought,
        context=context,
        challenges=challenges,
        errors=council.failures,
        summary=summarize(challenges),
        total_latency_ms=council.total_latency_ms,
        success_count=council.success_count,
        challenger_models=models,
    )
