# econ_compare/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.routing import APIRoute

from econ_compare.config import Settings
from econ_compare.providers.tradingeconomics import HistoricalSource
from econ_compare.routes import country, proxy
from econ_compare.services.container import build_services

logger = logging.getLogger("econ-compare")


# --- keep operation_id stable (avoid FastAPI auto-dedupe renaming) ----------
def _fixed_unique_id(route: APIRoute) -> str:
    return route.operation_id or f"{route.name}_{route.path}".strip("/").replace("/", "_")


def create_app(
    settings: Optional[Settings] = None,
    source: Optional[HistoricalSource] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the API. ``source`` replaces the upstream data source and
    ``transport`` the HTTP transport of the upstream clients (tests);
    by default data comes from Trading Economics, or through PROXY_URL when set.
    """
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        services = build_services(settings, source=source, transport=transport)
        services.cache.start()
        app.state.services = services
        logger.info(
            "[init] %d indicators, ttl=%ss, delay=%sms",
            len(settings.indicators), settings.ttl_seconds, settings.inter_call_delay_ms,
        )
        try:
            yield
        finally:
            await services.aclose()

    app = FastAPI(
        title="Econ Compare API",
        description="Cached Trading Economics indicators for country comparison",
        version="2026.10.19",
        generate_unique_id_function=_fixed_unique_id,
        lifespan=lifespan,
    )
    app.include_router(proxy.router)
    app.include_router(country.router)

    @app.get("/healthz")
    def healthz():
        # keep this super fast
        return {"status": "ok"}

    return app


app = create_app()
