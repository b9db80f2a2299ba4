"""Pick out the most recent collection run from the persisted history.

Runs are not tagged when stored, so a session is every item collected within
a fixed window of the newest timestamp. Two runs closer together than the
window read as one session, and a run whose writes straddle the window
boundary reads as two.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from newsrelay.config import settings
from newsrelay.models.items import CollectedItem

_MIN_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Stored value -> aware datetime, or None when it cannot be read."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _sort_key(item: CollectedItem) -> datetime:
    return parse_timestamp(item.collected_at) or _MIN_TIMESTAMP


def select_latest_session(
    items: list[CollectedItem],
    window_seconds: float | None = None,
) -> list[CollectedItem]:
    """Items within the window of the newest timestamp, newest first."""
    if window_seconds is None:
        window_seconds = settings.session_window_seconds

    ordered = sorted(items, key=_sort_key, reverse=True)
    if not ordered:
        return []

    newest = parse_timestamp(ordered[0].collected_at)
    if newest is None:
        return []

    latest: list[CollectedItem] = []
    for item in ordered:
        ts = parse_timestamp(item.collected_at)
        if ts is None:
            continue
        if abs((newest - ts).total_seconds()) < window_seconds:
            latest.append(item)
    return latest
