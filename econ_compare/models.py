# econ_compare/models.py
from __future__ import annotations

"""
Data model shared by the fetcher, aggregator and projections.

- Observation: one upstream data point (Category/Value/Frequency/DateTime)
- Succeeded / Failed: the tagged per-indicator slot of a CountryHistory
- CountryHistory: indicator -> slot, in configured fetch order
- ComparisonRow: one date-aligned row of a two-country comparison
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

ERROR_MARKER = "Error"


@dataclass(frozen=True)
class Observation:
    category: str
    value: Optional[float]
    frequency: Optional[str]
    timestamp: datetime

    def is_valid(self) -> bool:
        return (
            bool(self.category)
            and self.value is not None
            and math.isfinite(self.value)
            and self.value != 0.0
            and self.frequency is not None
        )

    @property
    def day(self) -> str:
        """Calendar day as YYYY-MM-DD (aware timestamps are read in UTC)."""
        ts = self.timestamp
        if ts.tzinfo is not None:
            ts = ts.astimezone(timezone.utc)
        return ts.date().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Category": self.category,
            "Value": self.value,
            "Frequency": self.frequency,
            "DateTime": self.timestamp.isoformat(),
        }


def filter_valid(observations: Iterable[Observation]) -> List[Observation]:
    return [o for o in observations if o.is_valid()]


@dataclass(frozen=True)
class Succeeded:
    observations: Tuple[Observation, ...] = ()


@dataclass(frozen=True)
class Failed:
    reason: str = ""


IndicatorResult = Union[Succeeded, Failed]


@dataclass
class CountryHistory:
    country: str
    indicators: Dict[str, Optional[IndicatorResult]] = field(default_factory=dict)

    @classmethod
    def empty(cls, country: str, indicators: Iterable[str]) -> "CountryHistory":
        return cls(country=country, indicators={name: None for name in indicators})

    def series(self, indicator: str) -> List[Observation]:
        """Observations for ``indicator``; failed or absent slots read as empty."""
        slot = self.indicators.get(indicator)
        if isinstance(slot, Succeeded):
            return list(slot.observations)
        return []

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for name, slot in self.indicators.items():
            if isinstance(slot, Succeeded):
                out[name] = [o.to_dict() for o in slot.observations]
            elif isinstance(slot, Failed):
                out[name] = ERROR_MARKER
            else:
                out[name] = None
        return out


@dataclass
class ComparisonRow:
    date: str
    country1: Optional[float] = None
    country2: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "country1": self.country1, "country2": self.country2}


def rows_to_dicts(rows: Iterable[ComparisonRow]) -> List[Mapping[str, Any]]:
    return [r.to_dict() for r in rows]
