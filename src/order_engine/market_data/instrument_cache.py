"""Expiring instrument metadata cache with single-flight fetches.

Exchange metadata (precisions, minimum notional) changes rarely, while a
decision cycle asks for it once per pair and several cycles may run at the
same time. Concurrent callers for the same pair share one in-flight fetch.
"""

import asyncio
import time
from collections.abc import Callable

from order_engine.exchange.client import ExchangeClient
from order_engine.logging import get_logger
from order_engine.models import InstrumentMetadata

logger = get_logger(__name__)


class InstrumentCache:
    """Per-pair metadata cache in front of an ExchangeClient.

    Failed fetches are not cached; the error is raised to every caller
    waiting on that fetch.

    Args:
        client: Exchange client used to fetch metadata on a miss.
        ttl_seconds: How long a fetched entry stays valid.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        client: ExchangeClient,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[InstrumentMetadata, float]] = {}
        self._inflight: dict[str, asyncio.Task[InstrumentMetadata]] = {}

    async def get(self, pair: str) -> InstrumentMetadata:
        """Return cached metadata for a pair, fetching it on a miss or expiry."""
        key = pair.upper()

        # No await between the lookups and registering the task, so two
        # callers can never start separate fetches for one key.
        entry = self._entries.get(key)
        if entry is not None and self._clock() < entry[1]:
            return entry[0]

        task = self._inflight.get(key)
        if task is None:
            logger.debug("instrument_cache_miss", pair=key)
            task = asyncio.ensure_future(self._fetch(key))
            self._inflight[key] = task

        # shield: a caller being cancelled must not cancel the shared fetch
        return await asyncio.shield(task)

    async def _fetch(self, key: str) -> InstrumentMetadata:
        try:
            metadata = await self._client.get_instrument_metadata(key)
            self._entries[key] = (metadata, self._clock() + self._ttl_seconds)
            return metadata
        finally:
            self._inflight.pop(key, None)

    def invalidate(self, pair: str) -> None:
        """Drop the cached entry for a pair, if any."""
        self._entries.pop(pair.upper(), None)

    def clear(self) -> None:
        """Drop all cached entries."""
        self._entries.clear()
