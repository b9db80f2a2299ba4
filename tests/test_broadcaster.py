from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from newsrelay.models.items import CollectedItem, Recipient
from newsrelay.services.broadcaster import BroadcastDispatcher


class FakeNotifier:
    def __init__(self, failing: set[str] | None = None, raising: set[str] | None = None):
        self.failing = failing or set()
        self.raising = raising or set()
        self.sent: list[tuple[str, dict]] = []

    def build_payload(self, item, mention_id=None):
        return {"content": f"<@{mention_id}>" if mention_id else "", "title": item.title}

    async def send(self, endpoint, payload):
        self.sent.append((endpoint, payload))
        if endpoint in self.raising:
            raise RuntimeError("connection reset")
        return endpoint not in self.failing


@pytest.fixture
def item() -> CollectedItem:
    return CollectedItem(
        title="YouTube policy update",
        link="https://example.com/policy",
        snippet="What changes for streamers",
        source_query="YouTube 仕様変更 最新",
        collected_at=datetime(2026, 10, 12, tzinfo=timezone.utc),
        row_id=3,
    )


def _recipients(n: int) -> list[Recipient]:
    return [
        Recipient(mention_id=f"user{i}", webhook_endpoint=f"https://discord.test/hook/{i}", is_eligible=True)
        for i in range(1, n + 1)
    ]


@pytest.mark.asyncio
async def test_failure_of_one_recipient_does_not_block_others(item):
    notifier = FakeNotifier(failing={"https://discord.test/hook/2"})
    dispatcher = BroadcastDispatcher(notifier, send_delay_seconds=0)

    success_count = await dispatcher.broadcast(_recipients(3), item)

    assert success_count == 2
    assert [endpoint for endpoint, _ in notifier.sent] == [
        "https://discord.test/hook/1",
        "https://discord.test/hook/2",
        "https://discord.test/hook/3",
    ]


@pytest.mark.asyncio
async def test_exception_from_notifier_is_absorbed(item):
    notifier = FakeNotifier(raising={"https://discord.test/hook/1"})
    dispatcher = BroadcastDispatcher(notifier, send_delay_seconds=0)

    assert await dispatcher.broadcast(_recipients(2), item) == 1
    assert len(notifier.sent) == 2


class PayloadFailingNotifier(FakeNotifier):
    def __init__(self, bad_mention: str):
        super().__init__()
        self.bad_mention = bad_mention

    def build_payload(self, item, mention_id=None):
        if mention_id == self.bad_mention:
            raise ValueError("cannot build payload for this recipient")
        return super().build_payload(item, mention_id)


@pytest.mark.asyncio
async def test_payload_error_for_one_recipient_does_not_block_others(item):
    notifier = PayloadFailingNotifier(bad_mention="user2")
    dispatcher = BroadcastDispatcher(notifier, send_delay_seconds=0)

    assert await dispatcher.broadcast(_recipients(3), item) == 2
    assert [endpoint for endpoint, _ in notifier.sent] == [
        "https://discord.test/hook/1",
        "https://discord.test/hook/3",
    ]


@pytest.mark.asyncio
async def test_only_eligible_recipients_with_webhooks_are_sent(item):
    recipients = [
        Recipient(mention_id="a", webhook_endpoint="https://discord.test/a", is_eligible=True),
        Recipient(mention_id="b", webhook_endpoint="https://discord.test/b", is_eligible=False),
        Recipient(mention_id="c", webhook_endpoint="", is_eligible=True),
        Recipient(mention_id="d", webhook_endpoint=None, is_eligible=True),
        Recipient(mention_id=None, webhook_endpoint="https://discord.test/e", is_eligible=True),
    ]
    notifier = FakeNotifier()
    dispatcher = BroadcastDispatcher(notifier, send_delay_seconds=0)

    assert len(dispatcher.eligible(recipients)) == 2
    assert await dispatcher.broadcast(recipients, item) == 2
    assert [p["content"] for _, p in notifier.sent] == ["<@a>", ""]


@pytest.mark.asyncio
async def test_delay_between_sends_but_not_after_last(item):
    dispatcher = BroadcastDispatcher(FakeNotifier(), send_delay_seconds=0.5)

    with patch("newsrelay.services.broadcaster.asyncio.sleep", new=AsyncMock()) as sleep:
        await dispatcher.broadcast(_recipients(3), item)

    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.5)


@pytest.mark.asyncio
async def test_no_eligible_recipients_returns_zero(item):
    dispatcher = BroadcastDispatcher(FakeNotifier(), send_delay_seconds=0)

    assert await dispatcher.broadcast([], item) == 0


@pytest.mark.asyncio
async def test_missing_item_is_rejected():
    dispatcher = BroadcastDispatcher(FakeNotifier(), send_delay_seconds=0)

    with pytest.raises(ValueError):
        await dispatcher.broadcast(_recipients(1), None)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_repeated_broadcast_is_not_prevented_here(item):
    notifier = FakeNotifier()
    dispatcher = BroadcastDispatcher(notifier, send_delay_seconds=0)

    await dispatcher.broadcast(_recipients(2), item)
    await dispatcher.broadcast(_recipients(2), item)

    assert len(notifier.sent) == 4
