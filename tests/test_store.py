from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from newsrelay.models.items import CollectedItem
from newsrelay.services import store as store_module
from newsrelay.services.store import InMemoryItemStore


def _item(title: str) -> CollectedItem:
    return CollectedItem(
        title=title,
        link=f"https://example.com/{title}",
        snippet="s",
        source_query="q",
        collected_at=datetime(2026, 10, 12, tzinfo=timezone.utc),
    )


@pytest.mark.asyncio
async def test_in_memory_store_round_trips_row_ids():
    store = InMemoryItemStore()
    await store.append([_item("a"), _item("b")])

    rows = await store.read_all()
    assert [(r.row_id, r.title) for r in rows] == [(1, "a"), (2, "b")]

    await store.mark_sent(rows[1].row_id)
    assert [r.sent for r in await store.read_all()] == [False, True]


@pytest.mark.asyncio
async def test_in_memory_store_rejects_unknown_row():
    store = InMemoryItemStore([_item("a")])

    with pytest.raises(KeyError):
        await store.mark_sent(5)


def test_store_factory_rejects_unknown_backend():
    with (
        patch.object(store_module, "_store", None),
        patch("newsrelay.services.store.settings") as mock_settings,
    ):
        mock_settings.store_backend = "sheets"
        with pytest.raises(ValueError):
            store_module.get_item_store()


def test_memory_directory_built_from_settings():
    with (
        patch.object(store_module, "_directory", None),
        patch("newsrelay.services.store.settings") as mock_settings,
    ):
        mock_settings.store_backend = "memory"
        mock_settings.recipient_webhook_list = ["https://discord.test/1"]
        directory = store_module.get_recipient_directory()

    assert isinstance(directory, store_module.StaticRecipientDirectory)


def _fake_supabase(rows):
    fake_result = SimpleNamespace(data=rows)
    fake_client = MagicMock()
    return fake_client, fake_result


@pytest.mark.asyncio
async def test_supabase_store_reads_rows_as_items():
    from newsrelay.services import supabase

    rows = [
        {
            "id": 7,
            "collected_at": "2026-10-12T00:00:00+00:00",
            "title": "T",
            "link": "https://t.com",
            "snippet": "S",
            "source_query": "Q",
            "published_at": None,
            "sent": False,
        },
        {
            "id": 8,
            "collected_at": "garbage",
            "title": "U",
            "link": "https://u.com",
            "snippet": None,
            "source_query": None,
            "sent": True,
        },
    ]
    fake_client, fake_result = _fake_supabase(rows)

    with (
        patch("newsrelay.services.supabase.client", return_value=fake_client),
        patch("newsrelay.services.supabase.asyncio.to_thread", new=AsyncMock(return_value=fake_result)),
    ):
        items = await supabase.SupabaseItemStore(table="collected_items").read_all()

    assert items[0].row_id == 7
    assert items[0].collected_at == datetime(2026, 10, 12, tzinfo=timezone.utc)
    assert items[1].collected_at is None
    assert items[1].snippet == ""
    assert items[1].sent is True


@pytest.mark.asyncio
async def test_supabase_store_append_and_mark_sent():
    from newsrelay.services import supabase

    fake_client, fake_result = _fake_supabase([])

    with (
        patch("newsrelay.services.supabase.client", return_value=fake_client),
        patch(
            "newsrelay.services.supabase.asyncio.to_thread", new=AsyncMock(return_value=fake_result)
        ) as to_thread,
    ):
        store = supabase.SupabaseItemStore(table="collected_items")
        await store.append([_item("a")])
        await store.mark_sent(7)

    inserted = fake_client.table.return_value.insert.call_args.args[0]
    assert inserted[0]["title"] == "a"
    assert inserted[0]["collected_at"] == "2026-10-12T00:00:00+00:00"
    assert inserted[0]["sent"] is False
    fake_client.table.return_value.update.assert_called_once_with({"sent": True})
    fake_client.table.return_value.update.return_value.eq.assert_called_once_with("id", 7)
    assert to_thread.await_count == 2


@pytest.mark.asyncio
async def test_supabase_store_append_skips_empty_batch():
    from newsrelay.services import supabase

    with patch("newsrelay.services.supabase.client") as client:
        await supabase.SupabaseItemStore(table="collected_items").append([])

    client.assert_not_called()


@pytest.mark.asyncio
async def test_supabase_recipients_map_active_status():
    from newsrelay.services import supabase

    rows = [
        {"status": " アクティブ ", "discord_id": "111", "webhook_url": "https://discord.test/1"},
        {"status": "休会", "discord_id": "222", "webhook_url": "https://discord.test/2"},
        {"status": "アクティブ", "discord_id": "", "webhook_url": ""},
    ]
    fake_client, fake_result = _fake_supabase(rows)

    with (
        patch("newsrelay.services.supabase.client", return_value=fake_client),
        patch("newsrelay.services.supabase.asyncio.to_thread", new=AsyncMock(return_value=fake_result)),
        patch("newsrelay.services.supabase.settings") as mock_settings,
    ):
        mock_settings.recipient_active_status = "アクティブ"
        recipients = await supabase.SupabaseRecipientDirectory(table="recipients").list()

    assert [r.is_eligible for r in recipients] == [True, False, True]
    assert [r.can_receive for r in recipients] == [True, False, False]
    assert recipients[0].mention_id == "111"
    assert recipients[2].mention_id is None


@pytest.mark.asyncio
async def test_supabase_store_pages_through_full_history():
    from newsrelay.services import supabase

    def _rows(first: int, count: int) -> list[dict]:
        return [
            {"id": n, "collected_at": "2026-10-12T00:00:00+00:00", "title": f"t{n}", "link": f"https://t.com/{n}"}
            for n in range(first, first + count)
        ]

    pages = [
        SimpleNamespace(data=_rows(1, 2)),
        SimpleNamespace(data=_rows(3, 2)),
        SimpleNamespace(data=_rows(5, 1)),
    ]
    fake_client = MagicMock()
    query = fake_client.table.return_value.select.return_value.order.return_value

    with (
        patch("newsrelay.services.supabase.client", return_value=fake_client),
        patch("newsrelay.services.supabase.READ_PAGE_SIZE", 2),
        patch("newsrelay.services.supabase.asyncio.to_thread", new=AsyncMock(side_effect=pages)),
    ):
        items = await supabase.SupabaseItemStore(table="collected_items").read_all()

    assert [i.row_id for i in items] == [1, 2, 3, 4, 5]
    fake_client.table.return_value.select.return_value.order.assert_called_with("id")
    assert [c.args for c in query.range.call_args_list] == [(0, 1), (2, 3), (4, 5)]
