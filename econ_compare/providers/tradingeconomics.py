# econ_compare/providers/tradingeconomics.py
from __future__ import annotations

"""
Trading Economics historical-data provider.

- Upstream: GET {base}/historical/country/{country}/indicator/{indicator}?c=<key>&f=json
- Country and indicator are sent lowercased, e.g. "new zealand" / "interest rate".
- Returns the raw JSON array (list of dicts with Category/Value/Frequency/DateTime).
- Any failure (network, non-2xx, non-list body) raises UpstreamFetchError.

Two sources share the same `get_historical` shape:
  TradingEconomicsClient  talks to the upstream API with the key
  ProxyClient             talks to this app's /api/proxy (key stays server-side)
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import quote

import httpx

from econ_compare.errors import UpstreamFetchError

logger = logging.getLogger("econ-compare")

USER_AGENT = "econ-compare/1.0 (+tradingeconomics)"
_HEADERS = {"Accept": "application/json", "User-Agent": USER_AGENT}


class HistoricalSource(Protocol):
    async def get_historical(self, country: str, indicator: str) -> List[Dict[str, Any]]:
        ...


# ------------------------------------------------------------------------------
# HTTP helpers
# ------------------------------------------------------------------------------
def _timeout(seconds: float) -> httpx.Timeout:
    return httpx.Timeout(
        timeout=seconds,
        connect=min(2.0, seconds),
        read=seconds,
        write=min(2.0, seconds),
        pool=min(2.0, seconds),
    )


def historical_path(country: str, indicator: str) -> str:
    c = quote((country or "").strip().lower(), safe="")
    i = quote((indicator or "").strip().lower(), safe="")
    return f"/historical/country/{c}/indicator/{i}"


def _ensure_records(payload: Any, country: str, indicator: str) -> List[Dict[str, Any]]:
    if not isinstance(payload, list):
        raise UpstreamFetchError(country, indicator, f"unexpected payload type {type(payload).__name__}")
    return payload


async def _get_json(
    client: httpx.AsyncClient,
    path: str,
    params: Dict[str, str],
    country: str,
    indicator: str,
    retries: int,
    backoff: float,
) -> Any:
    attempt = 0
    while True:
        attempt += 1
        try:
            logger.debug("GET %s (attempt %d)", path, attempt)
            r = await client.get(path, params=params)
            r.raise_for_status()
            return r.json()
        except httpx.HTTPStatusError as e:
            # str(e) embeds the full URL, including the key
            status = e.response.status_code
            err = UpstreamFetchError(country, indicator, f"HTTP {status}", status_code=status)
        except httpx.HTTPError as e:
            err = UpstreamFetchError(country, indicator, e.__class__.__name__)
        except ValueError:
            err = UpstreamFetchError(country, indicator, "response body is not JSON")
        logger.info("[TE] attempt %d failed %s: %s", attempt, path, err.reason)
        if attempt >= retries:
            raise err
        await asyncio.sleep(backoff * attempt)


# ------------------------------------------------------------------------------
# Upstream client
# ------------------------------------------------------------------------------
class TradingEconomicsClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.tradingeconomics.com",
        timeout: float = 8.0,
        retries: int = 1,
        backoff: float = 0.8,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self.retries = max(1, retries)
        self.backoff = backoff
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=_timeout(timeout),
            headers=_HEADERS,
            follow_redirects=True,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"TradingEconomicsClient(base_url={str(self._client.base_url)!r})"

    async def get_historical(self, country: str, indicator: str) -> List[Dict[str, Any]]:
        params = {"c": self._api_key, "f": "json"}
        data = await _get_json(
            self._client,
            historical_path(country, indicator),
            params,
            country,
            indicator,
            self.retries,
            self.backoff,
        )
        return _ensure_records(data, country, indicator)

    async def aclose(self) -> None:
        await self._client.aclose()


# ------------------------------------------------------------------------------
# Proxy client (reads through this app's /api/proxy endpoint)
# ------------------------------------------------------------------------------
class ProxyClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 8.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=_timeout(timeout),
            headers=_HEADERS,
            transport=transport,
        )

    async def get_historical(self, country: str, indicator: str) -> List[Dict[str, Any]]:
        params = {"country": country.lower(), "indicator": indicator.lower()}
        data = await _get_json(self._client, "/api/proxy", params, country, indicator, 1, 0.0)
        return _ensure_records(data, country, indicator)

    async def aclose(self) -> None:
        await self._client.aclose()
