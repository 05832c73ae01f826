"""Structured output extraction for free-text LLM responses.

Models often wrap JSON in markdown fences, XML-ish tags or surrounding
prose. Extraction tries each ParseStrategy in declaration order and the
first one that yields valid JSON wins.
"""

import json
import re
from enum import Enum
from typing import Any, Tuple


class JSONExtractionError(ValueError):
    """Raised when no strategy finds valid JSON in a response."""


class ParseStrategy(str, Enum):
    FENCED_JSON = "fenced_json"
    FENCED_PLAIN = "fenced_plain"
    XML_TAGGED = "xml_tagged"
    RAW_OBJECT = "raw_object"
    RAW_ARRAY = "raw_array"


_BODY = r"(\{[\s\S]*\}|\[[\s\S]*\])"

_PATTERNS = {
    ParseStrategy.FENCED_JSON: [re.compile(r"```json\s*" + _BODY + r"\s*```", re.IGNORECASE)],
    ParseStrategy.FENCED_PLAIN: [re.compile(r"```\s*" + _BODY + r"\s*```")],
    ParseStrategy.XML_TAGGED: [re.compile(r"<json>\s*" + _BODY + r"\s*</json>", re.IGNORECASE)],
    # Greedy first so nested objects survive, non-greedy as a fallback for
    # prose that contains a stray closing brace after the payload.
    ParseStrategy.RAW_OBJECT: [re.compile(r"\{[\s\S]*\}"), re.compile(r"\{[\s\S]*?\}")],
    ParseStrategy.RAW_ARRAY: [re.compile(r"\[[\s\S]*\]"), re.compile(r"\[[\s\S]*?\]")],
}


def _try_strategy(text: str, strategy: ParseStrategy) -> Tuple[bool, Any]:
    for pattern in _PATTERNS[strategy]:
        match = pattern.search(text)
        if not match:
            continue
        candidate = match.group(1) if match.groups() else match.group(0)
        try:
            return True, json.loads(candidate.strip())
        except json.JSONDecodeError:
            continue
    return False, None


def extract_json_with_strategy(text: str) -> Tuple[Any, ParseStrategy]:
    """Extract JSON and report which strategy produced it."""
    if not text or not isinstance(text, str):
        raise JSONExtractionError("Invalid input: text must be a non-empty string")

    # A bare payload needs no pattern search; this also keeps a top-level
    # array of objects from being read as its first element.
    stripped = text.strip()
    if stripped[:1] in ("{", "["):
        try:
            value = json.loads(stripped)
            strategy = ParseStrategy.RAW_OBJECT if isinstance(value, dict) else ParseStrategy.RAW_ARRAY
            return value, strategy
        except json.JSONDecodeError:
            pass

    for strategy in ParseStrategy:
        found, value = _try_strategy(text, strategy)
        if found:
            return value, strategy

    preview = text[:200] + "..." if len(text) > 200 else text
    raise JSONExtractionError(f"No valid JSON found in response. Preview: {preview}")


def extract_json(text: str) -> Any:
    """Extract and decode the first JSON payload found in `text`."""
    value, _ = extract_json_with_strategy(text)
    return value
