"""Map raw provider hits onto the canonical ProviderResult shape."""
from __future__ import annotations

from typing import Any, Iterable

from newsrelay.models.items import ProviderResult
from newsrelay.tools import web_utils


def normalize_result(
    *,
    title: Any,
    link: Any,
    snippet: Any = "",
    published_at: Any = None,
) -> ProviderResult | None:
    """Build a ProviderResult, or None when the hit has no title or usable link."""
    title = web_utils.clean_text(title if isinstance(title, str) else "", max_length=300)
    link = link.strip() if isinstance(link, str) else ""
    if not title or not web_utils.is_valid_url(link):
        return None

    snippet = web_utils.clean_text(snippet if isinstance(snippet, str) else "")
    if not isinstance(published_at, str) or not published_at.strip():
        published_at = None

    return ProviderResult(
        title=title,
        link=link,
        snippet=snippet,
        published_at=published_at.strip() if published_at else None,
    )


def normalize_results(raw_hits: Iterable[dict[str, Any]]) -> list[ProviderResult]:
    """Normalize already field-mapped hits, dropping unusable ones, order kept."""
    normalized: list[ProviderResult] = []
    for hit in raw_hits:
        result = normalize_result(
            title=hit.get("title"),
            link=hit.get("link"),
            snippet=hit.get("snippet", ""),
            published_at=hit.get("published_at"),
        )
        if result is not None:
            normalized.append(result)
    return normalized
