from __future__ import annotations

from dataclasses import replace
from typing import Any, Protocol

from newsrelay.config import settings
from newsrelay.models.items import CollectedItem, Recipient


class ItemStore(Protocol):
    async def append(self, items: list[CollectedItem]) -> None: ...
    async def read_all(self) -> list[CollectedItem]: ...
    async def mark_sent(self, row_id: Any) -> None: ...


class RecipientDirectory(Protocol):
    async def list(self) -> list[Recipient]: ...


class InMemoryItemStore:
    """Process-local store with 1-based row numbers, for development and tests."""

    def __init__(self, items: list[CollectedItem] | None = None):
        self._rows: list[CollectedItem] = []
        if items:
            self._rows.extend(replace(item, row_id=None) for item in items)

    async def append(self, items: list[CollectedItem]) -> None:
        self._rows.extend(replace(item, row_id=None) for item in items)

    async def read_all(self) -> list[CollectedItem]:
        return [replace(item, row_id=index) for index, item in enumerate(self._rows, start=1)]

    async def mark_sent(self, row_id: Any) -> None:
        index = int(row_id) - 1
        if index < 0 or index >= len(self._rows):
            raise KeyError(f"No row {row_id}")
        self._rows[index].sent = True


class StaticRecipientDirectory:
    def __init__(self, recipients: list[Recipient]):
        self._recipients = list(recipients)

    async def list(self) -> list[Recipient]:
        return list(self._recipients)


_store: ItemStore | None = None
_directory: RecipientDirectory | None = None


def get_item_store() -> ItemStore:
    global _store
    if _store is None:
        backend = settings.store_backend.lower().strip()
        if backend == "memory":
            _store = InMemoryItemStore()
        elif backend == "supabase":
            from newsrelay.services.supabase import SupabaseItemStore

            _store = SupabaseItemStore()
        else:
            raise ValueError(f"Unsupported STORE_BACKEND: {settings.store_backend}")
    return _store


def get_recipient_directory() -> RecipientDirectory:
    global _directory
    if _directory is None:
        backend = settings.store_backend.lower().strip()
        if backend == "memory":
            _directory = StaticRecipientDirectory(
                [
                    Recipient(webhook_endpoint=url, is_eligible=True)
                    for url in settings.recipient_webhook_list
                ]
            )
        elif backend == "supabase":
            from newsrelay.services.supabase import SupabaseRecipientDirectory

            _directory = SupabaseRecipientDirectory()
        else:
            raise ValueError(f"Unsupported STORE_BACKEND: {settings.store_backend}")
    return _directory
