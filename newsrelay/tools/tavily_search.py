from __future__ import annotations

from tavily import AsyncTavilyClient

from newsrelay.config import settings
from newsrelay.models.errors import ConfigurationError, UpstreamError
from newsrelay.models.items import ProviderResult
from newsrelay.tools.normalize import normalize_results


class TavilySearchProvider:
    """Tavily news search over the past week."""

    name = "tavily"
    consolidated = False

    async def search(self, topic: str, desired_count: int) -> list[ProviderResult]:
        if not settings.tavily_api_key:
            raise ConfigurationError(self.name, "TAVILY_API_KEY is not configured")

        client = AsyncTavilyClient(api_key=settings.tavily_api_key)
        try:
            response = await client.search(
                query=topic,
                search_depth="basic",
                max_results=max(desired_count, 1),
                topic="news",
                time_range="week",
                timeout=int(settings.provider_timeout_seconds),
            )
        except Exception as e:
            raise UpstreamError(self.name, f"{type(e).__name__}: {e}") from e

        hits = [
            {
                "title": r.get("title", ""),
                "link": r.get("url", ""),
                "snippet": r.get("content", ""),
                "published_at": r.get("published_date"),
            }
            for r in response.get("results", [])
        ]
        return normalize_results(hits)[:desired_count]
