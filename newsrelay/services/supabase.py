from __future__ import annotations

import asyncio
from typing import Any

from supabase import Client, create_client

from newsrelay.config import settings
from newsrelay.models.items import CollectedItem, Recipient
from newsrelay.services import logger as log_service
from newsrelay.services.env_safety import sanitize_ssl_keylogfile
from newsrelay.services.sessions import parse_timestamp


def get_client() -> Client:
    sanitize_ssl_keylogfile()
    return create_client(settings.supabase_url, settings.supabase_anon_key)


_client: Client | None = None

# PostgREST returns at most 1000 rows per request by default.
READ_PAGE_SIZE = 1000


def client() -> Client:
    global _client
    if _client is None:
        _client = get_client()
    return _client


async def _execute(query: Any) -> Any:
    """Run blocking Supabase query execution in a worker thread."""
    return await asyncio.to_thread(query.execute)


def _item_to_row(item: CollectedItem) -> dict[str, Any]:
    return {
        "collected_at": item.collected_at.isoformat() if item.collected_at else None,
        "title": item.title,
        "link": item.link,
        "snippet": item.snippet,
        "source_query": item.source_query,
        "published_at": item.published_at,
        "sent": item.sent,
    }


def _row_to_item(row: dict[str, Any]) -> CollectedItem:
    return CollectedItem(
        row_id=row.get("id"),
        title=row.get("title") or "",
        link=row.get("link") or "",
        snippet=row.get("snippet") or "",
        source_query=row.get("source_query") or "",
        collected_at=parse_timestamp(row.get("collected_at")),
        published_at=row.get("published_at") or None,
        sent=bool(row.get("sent")),
    )


def _row_to_recipient(row: dict[str, Any]) -> Recipient:
    status = (row.get("status") or "").strip()
    return Recipient(
        mention_id=(row.get("discord_id") or "").strip() or None,
        webhook_endpoint=(row.get("webhook_url") or "").strip() or None,
        is_eligible=status == settings.recipient_active_status,
        status=status,
    )


class SupabaseItemStore:
    """Collected items in one append-only table; ``id`` is the row handle."""

    def __init__(self, table: str | None = None):
        self.table = table or settings.items_table

    async def append(self, items: list[CollectedItem]) -> None:
        if not items:
            return
        rows = [_item_to_row(item) for item in items]
        try:
            await _execute(client().table(self.table).insert(rows))
        except Exception as e:
            log_service.log_db_operation("insert", self.table, "error", error=str(e))
            raise
        log_service.log_db_operation("insert", self.table, "success", details=f"{len(rows)} rows")

    async def read_all(self) -> list[CollectedItem]:
        """Full history, oldest first, fetched in pages under the API row cap."""
        rows: list[dict[str, Any]] = []
        start = 0
        while True:
            query = (
                client()
                .table(self.table)
                .select("*")
                .order("id")
                .range(start, start + READ_PAGE_SIZE - 1)
            )
            page = (await _execute(query)).data or []
            rows.extend(page)
            if len(page) < READ_PAGE_SIZE:
                break
            start += READ_PAGE_SIZE
        return [_row_to_item(row) for row in rows]

    async def mark_sent(self, row_id: Any) -> None:
        try:
            await _execute(client().table(self.table).update({"sent": True}).eq("id", row_id))
        except Exception as e:
            log_service.log_db_operation("update", self.table, "error", error=str(e))
            raise
        log_service.log_db_operation("update", self.table, "success", details=f"row {row_id} sent")


class SupabaseRecipientDirectory:
    def __init__(self, table: str | None = None):
        self.table = table or settings.recipients_table

    async def list(self) -> list[Recipient]:
        try:
            result = await _execute(client().table(self.table).select("*"))
        except Exception as e:
            log_service.log_db_operation("select", self.table, "error", error=str(e))
            return []
        return [_row_to_recipient(row) for row in result.data or []]
