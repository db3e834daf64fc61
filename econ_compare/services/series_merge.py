# econ_compare/services/series_merge.py
from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from econ_compare.models import ComparisonRow, Observation
from econ_compare.services.aggregator import CountryAggregator


def to_points(observations: Iterable[Observation]) -> List[Tuple[str, float]]:
    """[(YYYY-MM-DD, value), ...] in input order."""
    return [(o.day, o.value) for o in observations]


def merge_series(
    series1: Iterable[Tuple[str, float]],
    series2: Iterable[Tuple[str, float]],
) -> List[ComparisonRow]:
    """
    Align two (date, value) series on date.

    Every date from either side gets a row; the missing side stays None.
    A date repeated within one series keeps its last value.
    YYYY-MM-DD keys sort chronologically as strings.
    """
    rows: Dict[str, ComparisonRow] = {}
    for date, value in series1:
        rows.setdefault(date, ComparisonRow(date=date)).country1 = value
    for date, value in series2:
        rows.setdefault(date, ComparisonRow(date=date)).country2 = value
    return [rows[d] for d in sorted(rows)]


async def compare(
    aggregator: CountryAggregator,
    country1: str,
    country2: str,
    indicator: str,
) -> List[ComparisonRow]:
    h1 = await aggregator.get_history(country1)
    h2 = await aggregator.get_history(country2)
    return merge_series(to_points(h1.series(indicator)), to_points(h2.series(indicator)))
