# econ_compare/services/summary.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from econ_compare.models import CountryHistory, Succeeded
from econ_compare.services.aggregator import CountryAggregator

NOT_AVAILABLE = "Not available"

LatestValue = Optional[Union[float, str]]


def latest_values(history: CountryHistory) -> Dict[str, LatestValue]:
    """
    Last observed value per indicator.

    Non-empty series -> value of the last observation (upstream delivers them
    oldest first); empty series -> "Not available"; failed or absent -> None.
    """
    out: Dict[str, LatestValue] = {}
    for name, slot in history.indicators.items():
        if isinstance(slot, Succeeded):
            out[name] = slot.observations[-1].value if slot.observations else NOT_AVAILABLE
        else:
            out[name] = None
    return out


async def get_latest(aggregator: CountryAggregator, country: str) -> Dict[str, LatestValue]:
    return latest_values(await aggregator.get_history(country))


async def latest_table(
    aggregator: CountryAggregator,
    country1: str,
    country2: str,
    units: Optional[Dict[str, str]] = None,
) -> List[Dict[str, Any]]:
    """Side-by-side latest values with the difference when both are numbers."""
    left = await get_latest(aggregator, country1)
    right = await get_latest(aggregator, country2)
    units = units or {}

    rows = []
    for name in aggregator.indicators:
        a, b = left.get(name), right.get(name)
        diff = None
        if isinstance(a, float) and isinstance(b, float):
            diff = a - b
        rows.append({
            "indicator": name,
            "unit": units.get(name),
            "country1": a,
            "country2": b,
            "difference": diff,
        })
    return rows
