from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException

from newsrelay.api import deps
from newsrelay.models.errors import AlreadySent, ItemNotFound
from newsrelay.models.schemas import (
    CollectResponse,
    ItemResponse,
    LatestItemsResponse,
    SendRequest,
    SendResponse,
)
from newsrelay.services import logger as log_service
from newsrelay.services import pipeline

router = APIRouter(prefix="/api", tags=["items"])

_last_collection: datetime | None = None


def last_collection() -> datetime | None:
    return _last_collection


async def _run_collection() -> CollectResponse:
    global _last_collection
    outcome = await pipeline.collect_now(deps.get_orchestrator(), deps.get_item_store())
    if outcome.found_nothing:
        return CollectResponse(success=True, message="No new items found", collected=0)

    _last_collection = datetime.now(timezone.utc)
    return CollectResponse(
        success=True,
        message=f"Collected {outcome.count} items",
        collected=outcome.count,
    )


@router.get("/items", response_model=LatestItemsResponse)
async def list_latest_items():
    """Items from the most recent collection run."""
    items = await pipeline.latest_session(deps.get_item_store())
    return LatestItemsResponse(
        items=[ItemResponse(**item.to_dict()) for item in items],
        last_collection=_last_collection,
    )


@router.post("/collect", response_model=CollectResponse)
async def collect():
    """Run a collection now and persist the results."""
    return await _run_collection()


@router.post("/collect-on-startup", response_model=CollectResponse)
async def collect_on_startup():
    """Same as /collect; called once by the host after a deploy or restart."""
    log_service.log_event(event_type="startup_collection", message="Startup collection triggered")
    return await _run_collection()


@router.post("/send", response_model=SendResponse)
async def send(request: SendRequest):
    """Broadcast one item of the latest session to all eligible recipients."""
    if request.row_id in (None, ""):
        raise HTTPException(status_code=400, detail="Row id is required")

    try:
        outcome = await pipeline.send_item(
            request.row_id,
            store=deps.get_item_store(),
            directory=deps.get_recipient_directory(),
            dispatcher=deps.get_dispatcher(),
        )
    except ItemNotFound:
        raise HTTPException(status_code=404, detail="Information not found")
    except AlreadySent:
        raise HTTPException(status_code=400, detail="Already sent")

    return SendResponse(
        success=True,
        message=f"Sent to {outcome.success_count} of {outcome.eligible_count} recipients",
        sent_count=outcome.success_count,
        eligible_count=outcome.eligible_count,
    )
