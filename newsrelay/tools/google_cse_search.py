from __future__ import annotations

from typing import Any

import httpx

from newsrelay.config import settings
from newsrelay.models.errors import ConfigurationError, UpstreamError
from newsrelay.models.items import ProviderResult
from newsrelay.tools.normalize import normalize_results

GOOGLE_CSE_URL = "https://www.googleapis.com/customsearch/v1"
# The API rejects num > 10.
MAX_RESULTS_PER_REQUEST = 10


def _published_at(item: dict[str, Any]) -> str | None:
    metatags = (item.get("pagemap") or {}).get("metatags") or []
    if metatags and isinstance(metatags[0], dict):
        return metatags[0].get("article:published_time")
    return None


def map_items(payload: dict[str, Any]) -> list[ProviderResult]:
    """Map a customsearch/v1 response body onto canonical results."""
    return normalize_results(
        {
            "title": item.get("title", ""),
            "link": item.get("link", ""),
            "snippet": item.get("snippet", ""),
            "published_at": _published_at(item),
        }
        for item in payload.get("items") or []
    )


class GoogleCSEProvider:
    """Google Custom Search JSON API, restricted to recent pages."""

    name = "google_cse"
    consolidated = False

    async def search(self, topic: str, desired_count: int) -> list[ProviderResult]:
        if not settings.google_api_key or not settings.search_engine_id:
            raise ConfigurationError(self.name, "GOOGLE_API_KEY / SEARCH_ENGINE_ID not configured")

        params: dict[str, Any] = {
            "key": settings.google_api_key,
            "cx": settings.search_engine_id,
            "q": topic,
            "num": max(1, min(desired_count, MAX_RESULTS_PER_REQUEST)),
        }
        if settings.google_date_restrict:
            params["dateRestrict"] = settings.google_date_restrict
        if settings.google_language:
            params["lr"] = settings.google_language
        if settings.google_sort:
            params["sort"] = settings.google_sort

        try:
            async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as client:
                response = await client.get(GOOGLE_CSE_URL, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                self.name,
                f"HTTP {e.response.status_code}: {e.response.text[:300]}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(self.name, f"{type(e).__name__}: {e}") from e

        return map_items(payload)[:desired_count]
