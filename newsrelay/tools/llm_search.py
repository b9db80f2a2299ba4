"""Generation-model providers that answer from a live web search.

The model is asked for a JSON array; its prose answer goes through
extraction, link validation and normalization before anything leaves the
provider.
"""
from __future__ import annotations

import time

from newsrelay import llm_client
from newsrelay.config import settings
from newsrelay.models.errors import ConfigurationError, UpstreamError
from newsrelay.models.items import ProviderResult
from newsrelay.services import logger as log_service
from newsrelay.tools import extraction
from newsrelay.tools.link_validator import LinkValidator
from newsrelay.tools.normalize import normalize_results

SYSTEM_PROMPT = (
    "You are a news researcher. Use web search to find recent, real articles "
    "and answer only with data you found. Never invent URLs."
)


def build_prompt(topic: str, desired_count: int) -> str:
    return (
        f"Find the {desired_count} most useful news items published in the last 7 days about:\n"
        f"{topic}\n\n"
        "Rank them from most to least useful and drop duplicates covering the same story.\n"
        "Answer with a JSON array only, no commentary, where each element is:\n"
        '{"title": "...", "url": "https://...", "snippet": "one or two sentence summary", '
        '"published_at": "YYYY-MM-DD or empty"}\n'
        "Write title and snippet in the language of the source article. "
        "Every url must be the article page you actually found."
    )


class WebGroundedProvider:
    name = "generation"
    consolidated = True

    def __init__(self, validator: LinkValidator | None = None):
        self.validator = validator or LinkValidator()

    def _check_config(self) -> None:
        raise NotImplementedError

    async def _complete(self, prompt: str, desired_count: int) -> llm_client.Completion:
        raise NotImplementedError

    async def search(self, topic: str, desired_count: int) -> list[ProviderResult]:
        self._check_config()

        started = time.monotonic()
        try:
            completion = await self._complete(build_prompt(topic, desired_count), desired_count)
        except Exception as e:
            log_service.log_llm_call(
                model=self.name,
                caller=f"{self.name}_search",
                duration_ms=int((time.monotonic() - started) * 1000),
                status="error",
                error=str(e),
            )
            raise UpstreamError(self.name, f"{type(e).__name__}: {e}") from e

        log_service.log_llm_call(
            model=completion.model,
            caller=f"{self.name}_search",
            input_tokens=completion.usage.input_tokens,
            output_tokens=completion.usage.output_tokens,
            duration_ms=int((time.monotonic() - started) * 1000),
        )

        candidates = extraction.extract(completion.text)
        if not candidates:
            return []

        checked = await self.validator.filter_live(candidates)
        results = normalize_results(
            {
                "title": c.get("title", ""),
                "link": c.get("url", ""),
                "snippet": c.get("snippet", ""),
                "published_at": c.get("published_at"),
            }
            for c in checked
        )
        return results[:desired_count]


class OpenRouterWebProvider(WebGroundedProvider):
    name = "openrouter"

    def _check_config(self) -> None:
        if not settings.openrouter_api_key:
            raise ConfigurationError(self.name, "OPENROUTER_API_KEY is not configured")

    async def _complete(self, prompt: str, desired_count: int) -> llm_client.Completion:
        return await llm_client.openrouter_web_completion(
            SYSTEM_PROMPT,
            prompt,
            max_results=max(settings.web_search_max_results, desired_count),
        )


class AnthropicWebProvider(WebGroundedProvider):
    name = "anthropic"

    def _check_config(self) -> None:
        if not settings.anthropic_api_key:
            raise ConfigurationError(self.name, "ANTHROPIC_API_KEY is not configured")

    async def _complete(self, prompt: str, desired_count: int) -> llm_client.Completion:
        return await llm_client.anthropic_web_completion(SYSTEM_PROMPT, prompt)
