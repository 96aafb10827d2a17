# gdp_radar/providers/wb_provider.py
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional
import logging
import os
import httpx

from gdp_radar.providers.errors import FetchError, NoDataError
from gdp_radar.providers.wb_schemas import (
    WBCountryRecord,
    WBIndicatorRecord,
    parse_records,
    split_envelope,
)
from gdp_radar.utils.series_math import growth_rates
from gdp_radar.utils.ttl_cache import TTLCache, countries_key, gdp_key
from gdp_radar.utils.types import Country, GDPDataPoint

logger = logging.getLogger("gdp-radar")

# -------------------------------------------------------------------
# CONFIG
# -------------------------------------------------------------------
WB_BASE = os.getenv("WB_BASE", "https://api.worldbank.org/v2").rstrip("/")
WB_TIMEOUT = float(os.getenv("WB_TIMEOUT", "10.0"))
WB_CACHE_TTL = float(os.getenv("WB_CACHE_TTL", str(24 * 60 * 60)))
WB_COUNTRIES_PER_PAGE = int(os.getenv("WB_COUNTRIES_PER_PAGE", "300"))
WB_GDP_PER_PAGE = int(os.getenv("WB_GDP_PER_PAGE", "100"))
WB_DEBUG = os.getenv("WB_DEBUG", "0") == "1"

# GDP per capita (current US$)
GDP_PER_CAPITA = "NY.GDP.PCAP.CD"


# -------------------------------------------------------------------
# HTTP CLIENT
# -------------------------------------------------------------------
def _timeout() -> httpx.Timeout:
    return httpx.Timeout(
        timeout=WB_TIMEOUT,
        connect=min(2.0, WB_TIMEOUT),
        read=WB_TIMEOUT,
        write=min(2.0, WB_TIMEOUT),
        pool=min(2.0, WB_TIMEOUT),
    )


def make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=_timeout(),
        headers={"Accept": "application/json"},
        follow_redirects=True,
    )


# -------------------------------------------------------------------
# NORMALIZATION
# -------------------------------------------------------------------
def countries_from_records(records: List[Any]) -> List[Country]:
    """
    Keep sovereign states only (aggregates have no capital) → [{code, name, region}].

    Single bad rows are dropped; a non-empty list with no valid row raises FetchError.
    """
    parsed = parse_records(records, WBCountryRecord)
    if records and not parsed:
        raise FetchError("malformed country records")
    out: List[Country] = []
    for rec in parsed:
        if not rec.is_sovereign:
            continue
        out.append({"code": rec.id, "name": rec.name, "region": rec.region.value})
    return out


def gdp_points_from_records(records: List[Any]) -> List[GDPDataPoint]:
    """
    Raw indicator rows → [{year, value, growth}] ascending by year.

    The service answers newest -> oldest; rows are re-sorted ascending
    rather than kept in service order, so growth is measured forward in
    time. Growth is still taken against the previous *returned* point, so
    a missing year is not bridged.

    Rows with a null value are dropped (may leave an empty list). A
    non-empty list where no row validates raises FetchError.
    """
    parsed = parse_records(records, WBIndicatorRecord)
    if records and not parsed:
        raise FetchError("malformed indicator records")
    rows = [r for r in parsed if r.value is not None]
    rows.sort(key=lambda r: r.year)
    values = [float(r.value) for r in rows]  # type: ignore[arg-type]
    return [
        {"year": r.year, "value": v, "growth": g}
        for r, v, g in zip(rows, values, growth_rates(values))
    ]


# -------------------------------------------------------------------
# PROVIDER
# -------------------------------------------------------------------
class WorldBankProvider:
    """
    Async World Bank client with a per-query TTL cache.

    The HTTP client, the cache and the cache key functions are owned by
    whoever builds the provider; pass them in to share a cache, namespace
    keys, or fake the network.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[TTLCache] = None,
        base_url: str = WB_BASE,
        indicator: str = GDP_PER_CAPITA,
        countries_key_fn: Callable[[], str] = countries_key,
        gdp_key_fn: Callable[[str, int, int], str] = gdp_key,
    ) -> None:
        self._client = client or make_client()
        self._owns_client = client is None
        self.cache = cache if cache is not None else TTLCache(ttl_seconds=WB_CACHE_TTL)
        self.countries_key_fn = countries_key_fn
        self.gdp_key_fn = gdp_key_fn
        self.base_url = base_url.rstrip("/")
        self.indicator = indicator

    async def __aenter__(self) -> "WorldBankProvider":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        if WB_DEBUG:
            logger.debug("[WB] GET %s params=%s", url, params)
        try:
            r = await self._client.get(url, params=params)
            r.raise_for_status()
            return r.json()
        except httpx.HTTPStatusError as e:
            raise FetchError(f"HTTP {e.response.status_code} from {url}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"request to {url} failed: {e!r}") from e
        except ValueError as e:
            raise FetchError(f"invalid JSON from {url}") from e

    async def fetch_countries(self) -> List[Country]:
        key = self.countries_key_fn()
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("[cache] hit %s", key)
            return cached

        try:
            payload = await self._get_json(
                "/country", {"format": "json", "per_page": WB_COUNTRIES_PER_PAGE}
            )
            _, records = split_envelope(payload)
            if records is None:
                raise FetchError("country list came back empty")
            countries = countries_from_records(records)
        except FetchError as e:
            logger.error("Error fetching countries: %s", e)
            raise FetchError(f"Failed to fetch countries: {e}") from e

        self.cache.set(key, countries)
        return countries

    async def fetch_gdp_data(self, country_code: str, start_year: int, end_year: int) -> List[GDPDataPoint]:
        key = self.gdp_key_fn(country_code, start_year, end_year)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("[cache] hit %s", key)
            return cached

        try:
            payload = await self._get_json(
                f"/country/{country_code}/indicator/{self.indicator}",
                {
                    "format": "json",
                    "date": f"{start_year}:{end_year}",
                    "per_page": WB_GDP_PER_PAGE,
                },
            )
            _, records = split_envelope(payload)
            if not records:
                raise NoDataError("No data available")
            points = gdp_points_from_records(records)
            if not points:
                raise NoDataError("No data available")
        except NoDataError as e:
            logger.error("Error fetching GDP data for %s: %s", country_code, e)
            raise NoDataError(f"Failed to fetch GDP data for {country_code}: {e}") from e
        except FetchError as e:
            logger.error("Error fetching GDP data for %s: %s", country_code, e)
            raise FetchError(f"Failed to fetch GDP data for {country_code}: {e}") from e

        self.cache.set(key, points)
        return points


__all__ = [
    "WorldBankProvider",
    "make_client",
    "countries_from_records",
    "gdp_points_from_records",
    "GDP_PER_CAPITA",
    "WB_BASE",
]
