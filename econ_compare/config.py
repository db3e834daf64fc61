# econ_compare/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

# ------------------------------------------------------------------------------
# Static defaults
# ------------------------------------------------------------------------------
# Fetch order matters: indicators are requested one by one in this order.
DEFAULT_INDICATORS: Tuple[str, ...] = (
    "GDP",
    "Population",
    "Interest Rate",
    "Inflation Rate",
    "Current Account",
    "Unemployment Rate",
    "Balance of Trade",
    "Government Debt",
)

INDICATOR_UNITS: Dict[str, str] = {
    "GDP": "USD Billion",
    "Population": "Million",
    "Interest Rate": "Percent",
    "Inflation Rate": "Percent",
    "Current Account": "SEK Billion",
    "Unemployment Rate": "Percent",
    "Balance of Trade": "SEK Million",
    "Government Debt": "SEK Million",
}

# countries reachable with the free Trading Economics tier
DEFAULT_COUNTRIES: Tuple[str, ...] = ("Mexico", "New Zealand", "Sweden", "Thailand")

DEFAULT_BASE_URL = "https://api.tradingeconomics.com"
GUEST_API_KEY = "guest:guest"


def _csv(raw: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    if not raw:
        return default
    items = tuple(p.strip() for p in raw.split(",") if p.strip())
    return items or default


# ------------------------------------------------------------------------------
# Settings
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class Settings:
    ttl_seconds: float = 500.0
    cache_sweep_interval_seconds: float = 200.0
    inter_call_delay_ms: float = 250.0
    indicators: Tuple[str, ...] = DEFAULT_INDICATORS
    countries: Tuple[str, ...] = DEFAULT_COUNTRIES
    upstream_api_key: str = field(default=GUEST_API_KEY, repr=False)
    upstream_base_url: str = DEFAULT_BASE_URL
    upstream_timeout_sec: float = 8.0
    upstream_retries: int = 1
    upstream_backoff: float = 0.8
    proxy_url: Optional[str] = None
    log_level: str = "INFO"

    @property
    def inter_call_delay_sec(self) -> float:
        return self.inter_call_delay_ms / 1000.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            ttl_seconds=float(os.getenv("TTL_SECONDS", "500")),
            cache_sweep_interval_seconds=float(os.getenv("CACHE_SWEEP_INTERVAL_SECONDS", "200")),
            inter_call_delay_ms=float(os.getenv("INTER_CALL_DELAY_MS", "250")),
            indicators=_csv(os.getenv("INDICATOR_SET"), DEFAULT_INDICATORS),
            countries=_csv(os.getenv("SUPPORTED_COUNTRIES"), DEFAULT_COUNTRIES),
            upstream_api_key=os.getenv("UPSTREAM_API_KEY") or GUEST_API_KEY,
            upstream_base_url=os.getenv("UPSTREAM_BASE_URL", DEFAULT_BASE_URL),
            upstream_timeout_sec=float(os.getenv("UPSTREAM_TIMEOUT_SEC", "8.0")),
            upstream_retries=max(1, int(os.getenv("UPSTREAM_RETRIES", "1"))),
            upstream_backoff=float(os.getenv("UPSTREAM_BACKOFF", "0.8")),
            proxy_url=os.getenv("PROXY_URL") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
