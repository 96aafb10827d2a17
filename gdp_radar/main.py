# gdp_radar/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from gdp_radar.providers.errors import FetchError, NoDataError
from gdp_radar.routes import gdp

logger = logging.getLogger("gdp-radar")
logging.basicConfig(level=os.getenv("GDP_RADAR_LOG_LEVEL", "INFO").upper())


# --- keep operation_id stable (avoid FastAPI auto-dedupe renaming) ----------
def _fixed_unique_id(route: APIRoute) -> str:
    return route.operation_id or f"{route.name}_{route.path}".strip("/").replace("/", "_")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await gdp.close_provider()


app = FastAPI(
    title="GDP Radar API",
    description="GDP per capita series, comparison and export",
    version="2026.10.18",
    generate_unique_id_function=_fixed_unique_id,
    lifespan=lifespan,
)


@app.exception_handler(FetchError)
async def fetch_error_handler(request: Request, exc: FetchError) -> JSONResponse:
    # NoDataError is a FetchError; the client only needs to know loading failed
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=502,
        content={"error": str(exc), "no_data": isinstance(exc, NoDataError)},
    )


app.include_router(gdp.router)
logger.info("[init] gdp router mounted")


@app.get("/")
def root():
    return {
        "ok": True,
        "routes": ["/v1/countries", "/v1/gdp/{country}", "/v1/series", "/v1/export/{country}"],
    }


@app.get("/healthz")
def healthz():
    # keep this super fast
    return {"status": "ok"}
