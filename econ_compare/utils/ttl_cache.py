# econ_compare/utils/ttl_cache.py
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

logger = logging.getLogger("econ-compare")

V = TypeVar("V")


class TTLCache(Generic[V]):
    """
    In-process key/value store with a fixed time-to-live.

    Entries expire ``ttl_seconds`` after they were set, whether or not they
    were read in between. ``get`` checks expiry lazily; ``start()`` adds a
    background task that purges expired entries every ``sweep_interval``
    seconds. No size bound, no LRU.
    """

    def __init__(
        self,
        ttl_seconds: float = 500.0,
        sweep_interval: float = 200.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl_seconds
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._store: Dict[str, Tuple[float, V]] = {}
        self._sweeper: Optional[asyncio.Task] = None

    def get(self, key: str) -> Optional[V]:
        hit = self._store.get(key)
        if hit is None:
            return None
        expires_at, value = hit
        if self._clock() >= expires_at:
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: str, value: V) -> None:
        self._store[key] = (self._clock() + self.ttl, value)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def sweep(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        expired = [k for k, (exp, _) in self._store.items() if now >= exp]
        for k in expired:
            del self._store[k]
        if expired:
            logger.debug("cache sweep purged %d entries", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    # --------------------------------------------------------------------------
    # background sweeper
    # --------------------------------------------------------------------------
    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start(self) -> None:
        """Start the periodic sweep on the running event loop (idempotent)."""
        if self.sweeping:
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever())

    async def stop(self) -> None:
        task, self._sweeper = self._sweeper, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            self.sweep()
