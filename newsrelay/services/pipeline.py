"""Collect-now and send operations invoked by the API routes and the CLI."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from newsrelay.models.errors import AlreadySent, ItemNotFound
from newsrelay.models.items import CollectedItem
from newsrelay.services.broadcaster import BroadcastDispatcher
from newsrelay.services.collector import CollectionOrchestrator
from newsrelay.services.sessions import select_latest_session
from newsrelay.services.store import ItemStore, RecipientDirectory


@dataclass(slots=True)
class CollectionOutcome:
    items: list[CollectedItem] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def found_nothing(self) -> bool:
        return not self.items


@dataclass(slots=True)
class SendOutcome:
    item: CollectedItem
    eligible_count: int
    success_count: int


async def collect_now(orchestrator: CollectionOrchestrator, store: ItemStore) -> CollectionOutcome:
    """Run one collection and append whatever it found.

    Always appends; runs are never deduplicated against earlier ones.
    """
    logger.info("=== Starting information collection ===")
    items = await orchestrator.run_collection()
    if not items:
        logger.info("No new information found")
        return CollectionOutcome()

    await store.append(items)
    logger.info(f"Collected {len(items)} items")
    return CollectionOutcome(items=items)


async def latest_session(store: ItemStore) -> list[CollectedItem]:
    return select_latest_session(await store.read_all())


async def send_item(
    row_id: Any,
    *,
    store: ItemStore,
    directory: RecipientDirectory,
    dispatcher: BroadcastDispatcher,
) -> SendOutcome:
    """Broadcast one item of the latest session, then mark it sent.

    The item is marked sent whatever the success count, so a partially
    delivered item is never re-broadcast.
    """
    session = await latest_session(store)
    target = next((item for item in session if str(item.row_id) == str(row_id)), None)
    if target is None:
        raise ItemNotFound(f"Item {row_id} not found in the latest session")
    if target.sent:
        raise AlreadySent(f"Item {row_id} was already sent")

    recipients = await directory.list()
    eligible_count = len(dispatcher.eligible(recipients))
    success_count = await dispatcher.broadcast(recipients, target)

    await store.mark_sent(target.row_id)
    return SendOutcome(item=target, eligible_count=eligible_count, success_count=success_count)
