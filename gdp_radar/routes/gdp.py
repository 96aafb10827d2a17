# gdp_radar/routes/gdp.py — countries, GDP series, comparison, export
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional
import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from gdp_radar.providers.errors import FetchError
from gdp_radar.providers.wb_provider import WorldBankProvider
from gdp_radar.services import export_service
from gdp_radar.services.analytics import align, compare
from gdp_radar.services.leaders import leaders_for
from gdp_radar.services.series_service import load_series, loaded_series
from gdp_radar.utils.country_codes import resolve_code
from gdp_radar.utils.types import CountrySeries, SeriesLoadResult

logger = logging.getLogger("gdp-radar")

router = APIRouter(prefix="/v1", tags=["gdp"])

DEFAULT_START = 1980
DEFAULT_END = 2023

# -----------------------------------------------------------------------------
# Provider (shared, lazily built)
# -----------------------------------------------------------------------------
_PROVIDER: Optional[WorldBankProvider] = None


def get_provider() -> WorldBankProvider:
    global _PROVIDER
    if _PROVIDER is None:
        _PROVIDER = WorldBankProvider()
    return _PROVIDER


async def close_provider() -> None:
    global _PROVIDER
    if _PROVIDER is not None:
        await _PROVIDER.aclose()
        _PROVIDER = None


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _json(data: object) -> JSONResponse:
    """JSON response where nan/inf become null."""

    def _safe_float(value: float) -> Optional[float]:
        if math.isnan(value) or math.isinf(value):
            return None
        return value

    return JSONResponse(content=jsonable_encoder(data, custom_encoder={float: _safe_float}))


def _check_range(start: int, end: int) -> None:
    if start > end:
        raise HTTPException(status_code=422, detail=f"start ({start}) is after end ({end})")


async def _country_names(provider: WorldBankProvider) -> Dict[str, str]:
    # names are cosmetic; a failed country list falls back to codes
    try:
        countries = await provider.fetch_countries()
    except FetchError as e:
        logger.warning("country names unavailable, using codes: %s", e)
        return {}
    return {c["code"]: c["name"] for c in countries}


async def _resolve(provider: WorldBankProvider, identifier: str) -> Optional[str]:
    code = resolve_code(identifier)
    if code is not None:
        return code
    try:
        countries = await provider.fetch_countries()
    except FetchError as e:
        logger.warning("cannot resolve %r without the country list: %s", identifier, e)
        return None
    return resolve_code(identifier, countries)


async def _build_series(provider: WorldBankProvider, identifier: str, start: int, end: int) -> CountrySeries:
    _check_range(start, end)
    code = await _resolve(provider, identifier)
    if code is None:
        raise HTTPException(status_code=404, detail=f"Unknown country: {identifier}")

    points = await provider.fetch_gdp_data(code, start, end)
    names = await _country_names(provider)
    return {
        "id": code,
        "name": names.get(code) or code,
        "gdp_data": points,
        "leaders": leaders_for(code),
    }


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------
@router.get("/countries", summary="Country list")
async def list_countries(provider: WorldBankProvider = Depends(get_provider)) -> JSONResponse:
    """Sovereign countries only (regions and income groups are dropped)."""
    return _json(await provider.fetch_countries())


@router.get("/gdp/{country}", summary="GDP per capita series")
async def gdp_series(
    country: str,
    start: int = Query(DEFAULT_START, description="First year (inclusive)"),
    end: int = Query(DEFAULT_END, description="Last year (inclusive)"),
    provider: WorldBankProvider = Depends(get_provider),
) -> JSONResponse:
    return _json(await _build_series(provider, country, start, end))


@router.get("/series", summary="Aligned series + optional comparison")
async def aligned_series(
    countries: List[str] = Query(..., description="Codes or names; repeat the parameter"),
    start: int = Query(DEFAULT_START),
    end: int = Query(DEFAULT_END),
    compare_mode: bool = Query(False, alias="compare", description="Add metrics for exactly two countries"),
    provider: WorldBankProvider = Depends(get_provider),
) -> JSONResponse:
    """
    Loads every requested country concurrently. Each country reports its
    own status under ``results``; the aligned ``rows`` only hold the ones
    that loaded.
    """
    _check_range(start, end)

    results: Dict[str, SeriesLoadResult] = {}
    codes: List[str] = []
    for ident in countries:
        code = await _resolve(provider, ident)
        if code is None:
            results[ident] = {"code": ident, "ok": False, "series": None, "error": f"Unknown country: {ident}"}
            continue
        codes.append(code)

    names = await _country_names(provider) if codes else {}
    results.update(await load_series(provider, codes, start, end, names=names))

    ok = loaded_series(results)
    out: Dict[str, Any] = {
        "period": [start, end],
        "rows": align(ok, (start, end)),
        "results": list(results.values()),
    }
    if compare_mode and len(ok) == 2:
        out["metrics"] = compare(ok[0], ok[1], out["rows"]).to_dict()
    return _json(out)


@router.get("/export/{country}", summary="Download a series as JSON or CSV")
async def export_series(
    country: str,
    start: int = Query(DEFAULT_START),
    end: int = Query(DEFAULT_END),
    fmt: Literal["json", "csv"] = Query("json"),
    provider: WorldBankProvider = Depends(get_provider),
) -> Response:
    series = await _build_series(provider, country, start, end)
    filename = export_service.export_filename(series, fmt)
    return Response(
        content=export_service.render(series, (start, end), fmt),
        media_type=export_service.MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
