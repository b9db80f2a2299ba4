from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from newsrelay.config import settings
from newsrelay.services import logger as log_service
from newsrelay.tools import web_utils


class LinkValidator:
    """Check that candidate links resolve to a live page before they are trusted."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        user_agent: str | None = None,
        enabled: bool | None = None,
    ):
        self.timeout = timeout if timeout is not None else settings.link_check_timeout_seconds
        self.user_agent = user_agent or settings.link_check_user_agent
        self.enabled = settings.link_validation_enabled if enabled is None else enabled

    @staticmethod
    def _accepted(response: httpx.Response) -> bool:
        return 200 <= response.status_code < 400

    async def is_live(self, url: str) -> bool:
        """HEAD probe, then one GET retry. Never raises."""
        if not web_utils.is_valid_url(url):
            return False

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
            ) as client:
                for method in ("HEAD", "GET"):
                    try:
                        response = await client.request(method, url)
                    except Exception as e:
                        logger.debug(f"{method} {url} failed: {type(e).__name__}: {e}")
                        continue
                    if self._accepted(response):
                        return True
                    logger.debug(f"{method} {url} returned {response.status_code}")
        except Exception as e:
            logger.warning(f"Link check for {url} aborted: {type(e).__name__}: {e}")
        return False

    async def filter_live(self, candidates: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Keep candidates whose ``url`` is live.

        When every candidate fails, the check is treated as inconclusive and
        the batch is returned unchanged so a run is never starved.
        """
        if not self.enabled or not candidates:
            return list(candidates)

        live: list[dict[str, Any]] = []
        for candidate in candidates:
            url = candidate.get("url", "")
            if await self.is_live(url):
                live.append(candidate)
            else:
                logger.info(f"Skipping unreachable link: {url}")

        if not live:
            log_service.log_event(
                event_type="validation_inconclusive",
                message="No candidate link passed validation; keeping unvalidated batch",
                candidates=len(candidates),
            )
            return list(candidates)
        return live
