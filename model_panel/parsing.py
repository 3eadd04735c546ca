"""Best-effort extraction of a JSON object from free-form model output."""

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```\s*$", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence (```json ... ```), if any."""
    cleaned = text.strip()
    match = _FENCE_RE.match(cleaned)
    if match:
        return match.group(1).strip()
    if cleaned.startswith("```"):
        # Unterminated fence: drop the opening line
        cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else cleaned.strip("`")
    return cleaned.strip()


def _find_balanced_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` span, ignoring braces inside strings."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape = False
    for idx in range(start, len(text)):
        char = text[idx]
        if in_string:
            if escape:
                escape = False
            elif char == "\\":
                escape = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:idx + 1]
    return None


def _loads_dict(candidate: str) -> dict[str, Any] | None:
    for attempt in (candidate, _TRAILING_COMMA_RE.sub(r"\1", candidate)):
        try:
            parsed = json.loads(attempt)
        except json.JSONDecodeError:
            continue
        return parsed if isinstance(parsed, dict) else None
    return None


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """Pull a JSON object out of ``text`` or return None. Never raises."""
    if not text:
        return None

    cleaned = strip_code_fence(text)
    parsed = _loads_dict(cleaned)
    if parsed is not None:
        return parsed

    block = _find_balanced_object(cleaned)
    if block is None:
        return None
    return _loads_dict(block)
