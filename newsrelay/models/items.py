from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(slots=True)
class ProviderResult:
    """Canonical hit returned by every search/generation provider."""
    title: str
    link: str
    snippet: str
    published_at: str | None = None


@dataclass(slots=True)
class CollectedItem:
    title: str
    link: str
    snippet: str
    source_query: str
    collected_at: datetime | None
    sent: bool = False
    published_at: str | None = None
    # Opaque store handle; only set on items read back from a store.
    row_id: Any = None

    @classmethod
    def from_result(
        cls,
        result: ProviderResult,
        *,
        source_query: str,
        collected_at: datetime,
    ) -> CollectedItem:
        return cls(
            title=result.title,
            link=result.link,
            snippet=result.snippet,
            source_query=source_query,
            collected_at=collected_at,
            sent=False,
            published_at=result.published_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_id": self.row_id,
            "title": self.title,
            "link": self.link,
            "snippet": self.snippet,
            "source_query": self.source_query,
            "collected_at": self.collected_at.isoformat() if self.collected_at else None,
            "published_at": self.published_at,
            "sent": self.sent,
        }


@dataclass(slots=True)
class Recipient:
    mention_id: str | None = None
    webhook_endpoint: str | None = None
    is_eligible: bool = False
    status: str = ""

    @property
    def can_receive(self) -> bool:
        return bool(self.is_eligible and (self.webhook_endpoint or "").strip())
