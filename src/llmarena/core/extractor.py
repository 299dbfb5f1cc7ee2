"""Response extractor — recover one JSON object from raw model output.

Models wrap answers in markdown fences, lead with prose, or trail off
with notes. The extractor takes the first balanced ``{ ... }`` block,
parses it, and gets exactly one repair pass (trailing commas) before
giving up.

First-wins: unlike a retry prompt, nothing here asks the model again,
so the earliest complete object is taken as the answer.
"""

import json
import re
from dataclasses import dataclass

_FENCE_OPEN_RE = re.compile(r"^```[a-zA-Z0-9_-]*\n?")
_FENCE_CLOSE_RE = re.compile(r"```\s*$")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


@dataclass(frozen=True)
class ExtractResult:
    """Result of extracting JSON from a model's raw output."""

    success: bool
    value: dict | None
    cleaned: str | None
    original: str


def extract_json(raw_text: str) -> ExtractResult:
    """Return the first balanced JSON object in ``raw_text``.

    ``cleaned`` is the exact substring that parsed (after the repair
    pass, if one was needed). On failure ``original`` carries the
    untouched input for diagnostics.
    """
    text = _strip_fences(raw_text.strip())

    candidate = _first_balanced_object(text)
    if candidate is None:
        return _failure(raw_text)

    value = _loads_object(candidate)
    if value is not None:
        return ExtractResult(
            success=True, value=value, cleaned=candidate, original=raw_text
        )

    repaired = _TRAILING_COMMA_RE.sub(r"\1", candidate)
    value = _loads_object(repaired)
    if value is not None:
        return ExtractResult(
            success=True, value=value, cleaned=repaired, original=raw_text
        )

    return _failure(raw_text)


def _failure(raw_text: str) -> ExtractResult:
    return ExtractResult(success=False, value=None, cleaned=None, original=raw_text)


def _strip_fences(text: str) -> str:
    if not text.startswith("```"):
        return text
    text = _FENCE_OPEN_RE.sub("", text, count=1)
    if text.endswith("```"):
        text = _FENCE_CLOSE_RE.sub("", text)
    return text.strip()


def _first_balanced_object(text: str) -> str | None:
    """Scan from the first '{' until brace depth returns to zero.

    Braces inside double-quoted strings are ignored; a backslash inside
    a string escapes the following character.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def _loads_object(candidate: str) -> dict | None:
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    # The candidate always starts with '{', so this only guards oddities
    return parsed if isinstance(parsed, dict) else None
