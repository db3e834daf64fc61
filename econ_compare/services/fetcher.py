# econ_compare/services/fetcher.py
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, List, Mapping, Optional

from econ_compare.errors import UpstreamFetchError
from econ_compare.models import Observation, filter_valid
from econ_compare.providers.tradingeconomics import HistoricalSource


def _coerce_float(x: Any) -> Optional[float]:
    if x is None or isinstance(x, bool):
        return None
    try:
        v = float(x)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(v):
        return None
    return v


def _parse_timestamp(raw: Any) -> Optional[datetime]:
    if not isinstance(raw, str) or not raw.strip():
        return None
    s = raw.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def parse_observation(row: Any, country: str, indicator: str) -> Observation:
    """Build an Observation from one upstream record; malformed rows raise."""
    if not isinstance(row, Mapping):
        raise UpstreamFetchError(country, indicator, "record is not an object")
    ts = _parse_timestamp(row.get("DateTime"))
    if ts is None:
        raise UpstreamFetchError(country, indicator, f"bad DateTime {row.get('DateTime')!r}")
    category = row.get("Category")
    return Observation(
        category=category if isinstance(category, str) else "",
        value=_coerce_float(row.get("Value")),
        frequency=row.get("Frequency"),
        timestamp=ts,
    )


class IndicatorFetcher:
    """Fetch one (country, indicator) history and keep only valid observations."""

    def __init__(self, source: HistoricalSource) -> None:
        self.source = source

    async def fetch(self, country: str, indicator: str) -> List[Observation]:
        records = await self.source.get_historical(country, indicator)
        try:
            return filter_valid(parse_observation(r, country, indicator) for r in records)
        except UpstreamFetchError:
            raise
        except Exception as e:
            raise UpstreamFetchError(country, indicator, "malformed record") from e
