from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from loguru import logger

from newsrelay.config import settings
from newsrelay.models.items import CollectedItem
from newsrelay.services import logger as log_service
from newsrelay.tools.search_provider import SearchProvider


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CollectionOrchestrator:
    """Run one collection pass against the active provider.

    Structured search providers are queried once per topic for their single
    best hit. Generation providers get one consolidated request for a ranked,
    deduplicated batch covering the whole domain. Calls are strictly
    sequential to stay inside upstream rate limits.
    """

    def __init__(
        self,
        provider: SearchProvider,
        topics: list[str] | None = None,
        *,
        request_delay_seconds: float | None = None,
        consolidated_count: int | None = None,
        consolidated_topic: str | None = None,
        consolidated_source_label: str | None = None,
    ):
        self.provider = provider
        self.topics = list(topics if topics is not None else settings.collection_topics)
        self.request_delay_seconds = (
            settings.request_delay_seconds if request_delay_seconds is None else request_delay_seconds
        )
        self.consolidated_count = (
            settings.consolidated_count if consolidated_count is None else consolidated_count
        )
        self.consolidated_topic = consolidated_topic or settings.collection_domain
        self.consolidated_source_label = (
            consolidated_source_label or settings.consolidated_source_label
        )

    async def run_collection(self) -> list[CollectedItem]:
        if self.provider.consolidated:
            items = await self._collect_consolidated()
        else:
            items = await self._collect_per_topic()

        log_service.log_event(
            event_type="collection_complete",
            message=f"Collected {len(items)} items",
            provider=self.provider.name,
            collected=len(items),
        )
        return items

    async def _collect_per_topic(self) -> list[CollectedItem]:
        items: list[CollectedItem] = []
        for index, topic in enumerate(self.topics):
            if index > 0 and self.request_delay_seconds > 0:
                await asyncio.sleep(self.request_delay_seconds)

            logger.info(f"Searching: {topic}")
            try:
                results = await self.provider.search(topic, 1)
            except Exception as e:
                log_service.log_provider_call(
                    self.provider.name, topic, 0, error=f"{type(e).__name__}: {e}"
                )
                continue

            log_service.log_provider_call(self.provider.name, topic, len(results))
            if results:
                items.append(
                    CollectedItem.from_result(results[0], source_query=topic, collected_at=_now())
                )
        return items

    async def _collect_consolidated(self) -> list[CollectedItem]:
        try:
            results = await self.provider.search(self.consolidated_topic, self.consolidated_count)
        except Exception as e:
            log_service.log_provider_call(
                self.provider.name,
                self.consolidated_source_label,
                0,
                error=f"{type(e).__name__}: {e}",
            )
            return []

        log_service.log_provider_call(
            self.provider.name, self.consolidated_source_label, len(results)
        )
        collected_at = _now()
        return [
            CollectedItem.from_result(
                result,
                source_query=self.consolidated_source_label,
                collected_at=collected_at,
            )
            for result in results[: self.consolidated_count]
        ]
