# econ_compare/services/aggregator.py
from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Optional, Sequence

from econ_compare.config import DEFAULT_INDICATORS
from econ_compare.errors import UpstreamFetchError
from econ_compare.models import CountryHistory, Failed, IndicatorResult, Succeeded
from econ_compare.services.fetcher import IndicatorFetcher
from econ_compare.utils.country_codes import resolve_country
from econ_compare.utils.gate import SerializationGate
from econ_compare.utils.ttl_cache import TTLCache

logger = logging.getLogger("econ-compare")

Sleep = Callable[[float], Awaitable[None]]


class CountryAggregator:
    """
    Builds a CountryHistory by calling the fetcher once per indicator.

    The cache and the gate are injected so one instance of each can be shared
    process-wide. The gate is held for the whole batch (every indicator and
    every delay), which serializes batches for different countries too.
    """

    def __init__(
        self,
        fetcher: IndicatorFetcher,
        cache: TTLCache[CountryHistory],
        gate: SerializationGate,
        indicators: Sequence[str] = DEFAULT_INDICATORS,
        delay_sec: float = 0.25,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache
        self.gate = gate
        self.indicators = tuple(indicators)
        self.delay_sec = delay_sec
        self._sleep = sleep

    async def get_history(self, country: str) -> CountryHistory:
        name = resolve_country(country)
        if name is None:
            return CountryHistory.empty(country or "", self.indicators)

        cached = self.cache.get(name)
        if cached is not None:
            logger.debug("cache hit for %s", name)
            return cached

        async with self.gate:
            # a batch for the same country may have completed while we queued
            cached = self.cache.get(name)
            if cached is not None:
                logger.debug("cache filled while waiting for %s", name)
                return cached
            history = await self._fetch_all(name)

        self.cache.set(name, history)
        return history

    async def _fetch_all(self, country: str) -> CountryHistory:
        started = time.monotonic()
        slots: Dict[str, Optional[IndicatorResult]] = {}
        last = len(self.indicators) - 1

        for i, indicator in enumerate(self.indicators):
            try:
                observations = await self.fetcher.fetch(country, indicator)
                slots[indicator] = Succeeded(tuple(observations))
            except UpstreamFetchError as e:
                logger.warning("fetch failed for %s/%s: %s", country, indicator, e.reason)
                slots[indicator] = Failed(e.reason)
            except Exception as e:
                logger.warning("fetch failed for %s/%s", country, indicator, exc_info=True)
                slots[indicator] = Failed(e.__class__.__name__)

            if i < last and self.delay_sec > 0:
                await self._sleep(self.delay_sec)

        failed = sum(1 for s in slots.values() if isinstance(s, Failed))
        logger.info(
            "fetched %d indicators for %s in %.2fs (%d failed)",
            len(slots), country, time.monotonic() - started, failed,
        )
        return CountryHistory(country=country, indicators=slots)
