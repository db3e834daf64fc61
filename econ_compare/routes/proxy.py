# econ_compare/routes/proxy.py — key-hiding pass-through to Trading Economics
from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from econ_compare.errors import UpstreamFetchError

logger = logging.getLogger("econ-compare")

router = APIRouter(tags=["proxy"])


@router.get("/api/proxy", summary="Upstream historical data")
async def proxy(
    request: Request,
    country: str = Query(..., description="Country name, e.g. sweden"),
    indicator: str = Query(..., description="Indicator name, e.g. gdp"),
):
    """
    Forward one historical-data request upstream with the server-side key.
    The key never appears in the response.
    """
    upstream = request.app.state.services.upstream
    try:
        data = await upstream.get_historical(country, indicator)
    except UpstreamFetchError as e:
        logger.warning("proxy failed for %s/%s: %s", country, indicator, e.reason)
        return JSONResponse(
            content={"error": "Failed to fetch data from external API"},
            status_code=500,
        )
    return JSONResponse(content=data)
