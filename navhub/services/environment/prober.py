from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Sequence, Set

from ..http.client import HttpClient
from .settle import SettleOnce

logger = logging.getLogger(__name__)


def cache_busted(url: str, stamp_ms: int) -> str:
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}_t={stamp_ms}"


def expand_candidates(urls: Sequence[str], secure_context: bool) -> List[str]:
    """Probe order: each URL, followed by its https:// upgrade under a secure context."""
    candidates: List[str] = []
    for url in urls:
        candidates.append(url)
        if secure_context and url.lower().startswith("http://"):
            candidates.append("https://" + url[len("http://"):])
    return candidates


class ReachabilityProber:
    """Best-effort check that a restricted network is reachable.

    Candidates are tried one after another; the first success wins. A timed-out
    request is not aborted, its late answer is simply ignored.
    """

    def __init__(
        self,
        http_client: HttpClient,
        *,
        secure_context: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.http_client = http_client
        self.secure_context = secure_context
        self._clock = clock
        self._inflight: Set[asyncio.Task] = set()

    async def probe(self, urls: Sequence[str], timeout_ms: int) -> bool:
        for candidate in expand_candidates(urls, self.secure_context):
            if await self._attempt(candidate, timeout_ms):
                logger.info("probe.reachable url=%s", candidate)
                return True
        return False

    async def _attempt(self, url: str, timeout_ms: int) -> bool:
        loop = asyncio.get_running_loop()
        outcome: SettleOnce[bool] = SettleOnce()
        timer = loop.call_later(timeout_ms / 1000.0, self._on_timeout, outcome, url, timeout_ms)
        task = loop.create_task(self._signal(url, outcome))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        try:
            return await outcome
        finally:
            timer.cancel()

    @staticmethod
    def _on_timeout(outcome: SettleOnce[bool], url: str, timeout_ms: int) -> None:
        if outcome.settle(False):
            logger.warning("probe.timeout url=%s timeout_ms=%d", url, timeout_ms)

    async def _signal(self, url: str, outcome: SettleOnce[bool]) -> None:
        target = cache_busted(url, int(self._clock() * 1000))
        try:
            resp = await self.http_client.get(target)
        except Exception as exc:  # noqa: BLE001 - any failure means unreachable
            if outcome.settle(False):
                logger.warning("probe.failed url=%s err=%s", url, exc)
            return
        if outcome.settle(resp.is_success):
            if not resp.is_success:
                logger.warning("probe.failed url=%s status=%d", url, resp.status_code)
