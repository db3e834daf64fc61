# econ_compare/services/container.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx

from econ_compare.config import Settings
from econ_compare.providers.tradingeconomics import (
    HistoricalSource,
    ProxyClient,
    TradingEconomicsClient,
)
from econ_compare.services.aggregator import CountryAggregator
from econ_compare.services.fetcher import IndicatorFetcher
from econ_compare.utils.gate import SerializationGate
from econ_compare.utils.ttl_cache import TTLCache


@dataclass
class Services:
    """Process-wide instances, built once at startup and shared by all requests."""

    settings: Settings
    upstream: TradingEconomicsClient
    source: HistoricalSource
    cache: TTLCache
    gate: SerializationGate
    aggregator: CountryAggregator

    async def aclose(self) -> None:
        await self.cache.stop()
        if self.source is not self.upstream and hasattr(self.source, "aclose"):
            await self.source.aclose()
        await self.upstream.aclose()


def build_services(
    settings: Settings,
    source: Optional[HistoricalSource] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Services:
    upstream = TradingEconomicsClient(
        api_key=settings.upstream_api_key,
        base_url=settings.upstream_base_url,
        timeout=settings.upstream_timeout_sec,
        retries=settings.upstream_retries,
        backoff=settings.upstream_backoff,
        transport=transport,
    )
    if source is None:
        if settings.proxy_url:
            source = ProxyClient(
                settings.proxy_url, timeout=settings.upstream_timeout_sec, transport=transport
            )
        else:
            source = upstream

    cache: TTLCache = TTLCache(
        ttl_seconds=settings.ttl_seconds,
        sweep_interval=settings.cache_sweep_interval_seconds,
    )
    gate = SerializationGate()
    aggregator = CountryAggregator(
        fetcher=IndicatorFetcher(source),
        cache=cache,
        gate=gate,
        indicators=settings.indicators,
        delay_sec=settings.inter_call_delay_sec,
    )
    return Services(
        settings=settings,
        upstream=upstream,
        source=source,
        cache=cache,
        gate=gate,
        aggregator=aggregator,
    )
