from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


# --- Requests ---


class SendRequest(BaseModel):
    row_id: Any = None


# --- Responses ---


class ItemResponse(BaseModel):
    row_id: Any = None
    title: str
    link: str
    snippet: str
    source_query: str
    collected_at: datetime | None = None
    published_at: str | None = None
    sent: bool = False


class LatestItemsResponse(BaseModel):
    items: list[ItemResponse]
    last_collection: datetime | None = None


class CollectResponse(BaseModel):
    success: bool
    message: str
    collected: int


class SendResponse(BaseModel):
    success: bool
    message: str
    sent_count: int
    eligible_count: int
