from __future__ import annotations

from typing import Any

import httpx

from newsrelay.config import settings
from newsrelay.models.errors import ConfigurationError, UpstreamError
from newsrelay.models.items import ProviderResult
from newsrelay.tools.normalize import normalize_results

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"


class BraveSearchProvider:
    """Brave web search, newest pages first within the configured freshness."""

    name = "brave"
    consolidated = False

    async def search(self, topic: str, desired_count: int) -> list[ProviderResult]:
        if not settings.brave_api_key:
            raise ConfigurationError(self.name, "BRAVE_API_KEY is not configured")

        params: dict[str, Any] = {
            "q": topic,
            "count": max(desired_count, 1),
        }
        if settings.brave_freshness:
            params["freshness"] = settings.brave_freshness

        try:
            async with httpx.AsyncClient(timeout=settings.provider_timeout_seconds) as client:
                response = await client.get(
                    BRAVE_SEARCH_URL,
                    params=params,
                    headers={
                        "Accept": "application/json",
                        "X-Subscription-Token": settings.brave_api_key,
                    },
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                self.name,
                f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(self.name, f"{type(e).__name__}: {e}") from e

        hits = []
        for item in payload.get("web", {}).get("results", []):
            snippets = item.get("extra_snippets", []) or []
            description = (item.get("description", "") or "").strip()
            hits.append(
                {
                    "title": item.get("title", ""),
                    "link": item.get("url", ""),
                    "snippet": description or " ".join(snippets).strip(),
                    "published_at": item.get("page_age"),
                }
            )
        return normalize_results(hits)[:desired_count]
