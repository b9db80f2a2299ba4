from __future__ import annotations

from newsrelay.services.broadcaster import BroadcastDispatcher
from newsrelay.services.collector import CollectionOrchestrator
from newsrelay.services.store import get_item_store, get_recipient_directory
from newsrelay.tools.discord_notifier import DiscordNotifier
from newsrelay.tools.search_provider import get_provider

_orchestrator: CollectionOrchestrator | None = None
_dispatcher: BroadcastDispatcher | None = None


def get_orchestrator() -> CollectionOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = CollectionOrchestrator(get_provider())
    return _orchestrator


def get_dispatcher() -> BroadcastDispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = BroadcastDispatcher(DiscordNotifier())
    return _dispatcher

