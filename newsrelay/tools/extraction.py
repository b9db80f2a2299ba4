"""Recover a JSON list of news candidates from free-form model output.

Models asked for a JSON array often wrap it in prose or code fences. The
span used is greedy: from the first ``[`` to the last ``]`` in the text. When
the answer holds several bracketed spans, everything between the outermost
pair is parsed as one document, which fails (and yields no candidates) unless
the spans nest inside a single array.
"""
from __future__ import annotations

import json
from typing import Any

from loguru import logger

from newsrelay.models.errors import ParseError

_URL_KEYS = ("url", "link")
_SNIPPET_KEYS = ("snippet", "description", "summary")


def _first_str(entry: dict[str, Any], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def parse_candidates(raw_text: str) -> list[dict[str, str]]:
    """Parse the outer bracketed span, raising ParseError when unusable."""
    text = raw_text or ""
    start = text.find("[")
    end = text.rfind("]")
    if start < 0 or end <= start:
        raise ParseError("no bracketed span found")

    try:
        parsed = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON list: {e}") from e
    if not isinstance(parsed, list):
        raise ParseError("bracketed span is not a list")

    candidates: list[dict[str, str]] = []
    for entry in parsed:
        if not isinstance(entry, dict):
            continue
        candidate = {
            "title": _first_str(entry, ("title",)),
            "url": _first_str(entry, _URL_KEYS),
            "snippet": _first_str(entry, _SNIPPET_KEYS),
        }
        published_at = _first_str(entry, ("published_at", "date"))
        if published_at:
            candidate["published_at"] = published_at
        candidates.append(candidate)
    return candidates


def extract(raw_text: str) -> list[dict[str, str]]:
    """Return candidates in model order, or [] when none can be recovered."""
    try:
        return parse_candidates(raw_text)
    except ParseError as e:
        logger.warning(f"Extraction failed ({e}); raw model output: {raw_text!r}")
        return []
