from __future__ import annotations

from typing import Callable, Protocol

from newsrelay.config import settings
from newsrelay.models.items import ProviderResult
from newsrelay.services.env_safety import sanitize_ssl_keylogfile
from newsrelay.tools.brave_search import BraveSearchProvider
from newsrelay.tools.google_cse_search import GoogleCSEProvider
from newsrelay.tools.llm_search import AnthropicWebProvider, OpenRouterWebProvider
from newsrelay.tools.tavily_search import TavilySearchProvider


class SearchProvider(Protocol):
    name: str
    # True when one request covers the whole topic domain (generation models).
    consolidated: bool

    async def search(self, topic: str, desired_count: int) -> list[ProviderResult]: ...


PROVIDERS: dict[str, Callable[[], SearchProvider]] = {
    "google_cse": GoogleCSEProvider,
    "brave": BraveSearchProvider,
    "tavily": TavilySearchProvider,
    "openrouter": OpenRouterWebProvider,
    "anthropic": AnthropicWebProvider,
}


def build_provider(name: str) -> SearchProvider:
    key = (name or "").lower().strip()
    factory = PROVIDERS.get(key)
    if factory is None:
        raise ValueError(f"Unsupported SEARCH_PROVIDER: {name}")
    return factory()


_provider: SearchProvider | None = None


def get_provider() -> SearchProvider:
    """Active provider for this process, chosen once from SEARCH_PROVIDER."""
    global _provider
    if _provider is None:
        sanitize_ssl_keylogfile()
        _provider = build_provider(settings.search_provider)
    return _provider
