from __future__ import annotations

import asyncio
from typing import Any, Protocol

from loguru import logger

from newsrelay.config import settings
from newsrelay.models.items import CollectedItem, Recipient
from newsrelay.services import logger as log_service


class Notifier(Protocol):
    def build_payload(self, item: CollectedItem, mention_id: str | None = None) -> dict[str, Any]: ...
    async def send(self, endpoint: str, payload: dict[str, Any]) -> bool: ...


class BroadcastDispatcher:
    """Send one item to every eligible recipient, one webhook at a time.

    Does not guard against sending the same item twice; callers check and
    set the item's sent flag around ``broadcast``.
    """

    def __init__(self, notifier: Notifier, *, send_delay_seconds: float | None = None):
        self.notifier = notifier
        self.send_delay_seconds = (
            settings.send_delay_seconds if send_delay_seconds is None else send_delay_seconds
        )

    @staticmethod
    def eligible(recipients: list[Recipient]) -> list[Recipient]:
        return [r for r in recipients if r.can_receive]

    async def broadcast(self, recipients: list[Recipient], item: CollectedItem) -> int:
        if item is None:
            raise ValueError("broadcast requires an item")

        targets = self.eligible(recipients or [])
        logger.info(f"Broadcasting to {len(targets)} eligible recipients...")

        success_count = 0
        for index, recipient in enumerate(targets):
            if index > 0 and self.send_delay_seconds > 0:
                await asyncio.sleep(self.send_delay_seconds)

            try:
                payload = self.notifier.build_payload(item, recipient.mention_id)
                delivered = await self.notifier.send(recipient.webhook_endpoint, payload)
            except Exception as e:
                logger.error(f"Failed to send to recipient {index + 1}: {type(e).__name__}: {e}")
                continue

            if delivered:
                success_count += 1
            else:
                logger.warning(f"Recipient {index + 1} did not accept the message")

        log_service.log_event(
            event_type="broadcast_complete",
            message=f"Sent to {success_count}/{len(targets)} recipients",
            eligible=len(targets),
            succeeded=success_count,
            link=item.link,
        )
        return success_count
