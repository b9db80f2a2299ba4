from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

import httpx
from loguru import logger

from newsrelay.config import settings
from newsrelay.models.items import CollectedItem

# Discord answers 204 No Content for webhook posts without ?wait=true.
ACCEPTED_STATUS = 204


def _format_collected_at(value: datetime | None) -> str:
    if value is None:
        return "-"
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(settings.display_timezone)).strftime("%Y/%m/%d %H:%M:%S")


class DiscordNotifier:
    """Post items as embeds to Discord incoming webhooks."""

    def __init__(self, *, timeout: float | None = None):
        self.timeout = timeout if timeout is not None else settings.notifier_timeout_seconds

    def build_payload(self, item: CollectedItem, mention_id: str | None = None) -> dict[str, Any]:
        mention = f"<@{mention_id.strip()}>" if mention_id and mention_id.strip() else ""
        return {
            "content": mention,
            "embeds": [
                {
                    "title": item.title[:256],
                    "url": item.link,
                    "description": item.snippet[:4096],
                    "color": settings.embed_color,
                    "fields": [
                        {
                            "name": settings.embed_query_label,
                            "value": item.source_query or "-",
                            "inline": True,
                        },
                        {
                            "name": settings.embed_collected_label,
                            "value": _format_collected_at(item.collected_at),
                            "inline": True,
                        },
                    ],
                    "footer": {"text": settings.embed_footer_text},
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                }
            ],
        }

    async def send(self, endpoint: str, payload: dict[str, Any]) -> bool:
        """True only when Discord accepted the message."""
        if not endpoint:
            logger.warning("Webhook URL is empty")
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(endpoint, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Failed to send to Discord: {type(e).__name__}: {e}")
            return False

        if response.status_code == ACCEPTED_STATUS:
            logger.info("Message sent to Discord")
            return True

        logger.error(f"Discord API error {response.status_code}: {response.text[:300]}")
        return False
