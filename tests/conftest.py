import asyncio
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

from econ_compare.config import DEFAULT_INDICATORS
from econ_compare.errors import UpstreamFetchError
from econ_compare.services.aggregator import CountryAggregator
from econ_compare.services.fetcher import IndicatorFetcher
from econ_compare.utils.gate import SerializationGate
from econ_compare.utils.ttl_cache import TTLCache


def te_row(date: str, value: Any, category: str = "GDP", frequency: Optional[str] = "Yearly") -> Dict[str, Any]:
    return {
        "Country": "Sweden",
        "Category": category,
        "DateTime": f"{date}T00:00:00",
        "Value": value,
        "Frequency": frequency,
        "HistoricalDataSymbol": "SWEGDP",
        "LastUpdate": "2024-03-01T09:30:00",
    }


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    """
    Stand-in for the upstream client. Records every call and yields to the
    event loop once per call so concurrent batches could interleave.
    """

    def __init__(
        self,
        data: Optional[Dict[Tuple[str, str], List[Dict[str, Any]]]] = None,
        failing: Set[Tuple[str, str]] = frozenset(),
        faulty: Set[Tuple[str, str]] = frozenset(),
    ) -> None:
        self.data = data or {}
        self.failing = set(failing)
        self.faulty = set(faulty)
        self.calls: List[Tuple[str, str]] = []

    async def get_historical(self, country: str, indicator: str) -> List[Dict[str, Any]]:
        self.calls.append((country, indicator))
        await asyncio.sleep(0)
        if (country, indicator) in self.failing:
            raise UpstreamFetchError(country, indicator, "HTTP 500", status_code=500)
        if (country, indicator) in self.faulty:
            raise RuntimeError(f"unexpected fault in {country}/{indicator}")
        return list(self.data.get((country, indicator), [te_row("2023-12-31", 1.5, category=indicator)]))


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_aggregator(clock, sleeper):
    def _make(src, indicators=DEFAULT_INDICATORS, ttl=500.0, sleep=None):
        return CountryAggregator(
            fetcher=IndicatorFetcher(src),
            cache=TTLCache(ttl_seconds=ttl, sweep_interval=200.0, clock=clock),
            gate=SerializationGate(),
            indicators=indicators,
            delay_sec=0.25,
            sleep=sleep or sleeper,
        )

    return _make
