# econ_compare/routes/country.py — history, latest values and two-country comparison
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Query, Request

from econ_compare.config import INDICATOR_UNITS
from econ_compare.models import rows_to_dicts
from econ_compare.services import series_merge, summary
from econ_compare.utils.country_codes import resolve_country

router = APIRouter(prefix="/v1", tags=["country"])


def _services(request: Request):
    return request.app.state.services


def _display_name(country: str) -> str:
    return resolve_country(country) or country


def _check_indicator(request: Request, indicator: str) -> None:
    if indicator not in _services(request).aggregator.indicators:
        raise HTTPException(status_code=422, detail=f"unknown indicator: {indicator}")


@router.get("/countries", summary="Supported countries and indicators")
def countries(request: Request) -> Dict[str, Any]:
    settings = _services(request).settings
    return {
        "countries": list(settings.countries),
        "indicators": [
            {"name": name, "unit": INDICATOR_UNITS.get(name)} for name in settings.indicators
        ],
    }


@router.get("/history", summary="Full indicator history for one country")
async def history(
    request: Request,
    country: str = Query("", description="Full country name, e.g. Sweden"),
) -> Dict[str, Any]:
    h = await _services(request).aggregator.get_history(country)
    return {"country": h.country, "indicators": h.to_dict()}


@router.get("/latest", summary="Latest value per indicator")
async def latest(
    request: Request,
    country: str = Query("", description="Full country name, e.g. Sweden"),
) -> Dict[str, Any]:
    values = await summary.get_latest(_services(request).aggregator, country)
    return {"country": _display_name(country), "latest": values}


@router.get("/latest-table", summary="Latest values for two countries side by side")
async def latest_table(
    request: Request,
    country1: str = Query(""),
    country2: str = Query(""),
) -> Dict[str, Any]:
    rows = await summary.latest_table(
        _services(request).aggregator, country1, country2, units=INDICATOR_UNITS
    )
    return {"country1": _display_name(country1), "country2": _display_name(country2), "rows": rows}


@router.get("/compare", summary="Date-aligned history of one indicator for two countries")
async def compare(
    request: Request,
    country1: str = Query(""),
    country2: str = Query(""),
    indicator: str = Query(..., description="Indicator name, e.g. GDP"),
) -> Dict[str, Any]:
    _check_indicator(request, indicator)
    rows = await series_merge.compare(_services(request).aggregator, country1, country2, indicator)
    return {
        "country1": _display_name(country1),
        "country2": _display_name(country2),
        "indicator": indicator,
        "rows": rows_to_dicts(rows),
    }
