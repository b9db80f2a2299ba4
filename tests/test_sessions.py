from __future__ import annotations

from datetime import datetime, timedelta, timezone

from newsrelay.models.items import CollectedItem
from newsrelay.services.sessions import parse_timestamp, select_latest_session

BASE = datetime(2026, 10, 12, 0, 0, 0, tzinfo=timezone.utc)


def _item(title: str, collected_at) -> CollectedItem:
    if isinstance(collected_at, (int, float)):
        collected_at = BASE + timedelta(seconds=collected_at)
    return CollectedItem(
        title=title,
        link=f"https://example.com/{title}",
        snippet="",
        source_query="q",
        collected_at=collected_at,
    )


def test_empty_history_returns_empty():
    assert select_latest_session([]) == []


def test_single_item_is_its_own_session():
    only = _item("only", 10)
    assert select_latest_session([only]) == [only]


def test_window_excludes_older_runs():
    items = [_item("t100", 100), _item("t40", 40), _item("t200", 200)]

    latest = select_latest_session(items, window_seconds=60)

    assert [i.title for i in latest] == ["t200"]


def test_window_includes_neighbour_within_tolerance():
    items = [_item("t100", 100), _item("t40", 40), _item("t200", 200), _item("t150", 150)]

    latest = select_latest_session(items, window_seconds=60)

    assert [i.title for i in latest] == ["t200", "t150"]


def test_boundary_is_exclusive():
    items = [_item("newest", 120), _item("edge", 60)]

    assert [i.title for i in select_latest_session(items, window_seconds=60)] == ["newest"]


def test_malformed_timestamps_do_not_crash_and_are_excluded():
    items = [_item("broken", None), _item("t50", 50), _item("t30", 30)]
    items[0].collected_at = "not a date"  # type: ignore[assignment]

    latest = select_latest_session(items, window_seconds=60)

    assert [i.title for i in latest] == ["t50", "t30"]


def test_all_malformed_yields_empty():
    item = _item("broken", None)

    assert select_latest_session([item]) == []


def test_parse_timestamp_accepts_iso_and_z_suffix():
    assert parse_timestamp("2026-10-12T00:00:00Z") == BASE
    assert parse_timestamp("2026-10-12T09:00:00+09:00") == BASE
    assert parse_timestamp("2026-10-12T00:00:00") == BASE
    assert parse_timestamp("") is None
    assert parse_timestamp(None) is None
    assert parse_timestamp("12/10/2026") is None
