# gdp_radar/services/series_service.py — concurrent per-country load
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence
import asyncio
import itertools
import logging

from gdp_radar.providers.errors import FetchError
from gdp_radar.providers.wb_provider import WorldBankProvider
from gdp_radar.services.leaders import leaders_for
from gdp_radar.utils.types import CountrySeries, Leader, SeriesLoadResult

logger = logging.getLogger("gdp-radar")


class SelectionGuard:
    """
    Hands out a token per selection. A load that finishes after a newer
    selection started is stale and its result should be dropped.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._current = 0

    def begin(self) -> int:
        self._current = next(self._counter)
        return self._current

    def is_current(self, token: int) -> bool:
        return token == self._current

    @property
    def current(self) -> int:
        return self._current


async def _load_one(
    provider: WorldBankProvider,
    code: str,
    start_year: int,
    end_year: int,
    name: str,
    leaders: List[Leader],
) -> SeriesLoadResult:
    try:
        points = await provider.fetch_gdp_data(code, start_year, end_year)
    except FetchError as e:
        logger.warning("series load failed for %s: %s", code, e)
        return {"code": code, "ok": False, "series": None, "error": str(e)}

    series: CountrySeries = {"id": code, "name": name, "gdp_data": points, "leaders": leaders}
    return {"code": code, "ok": True, "series": series, "error": None}


async def load_series(
    provider: WorldBankProvider,
    codes: Sequence[str],
    start_year: int,
    end_year: int,
    names: Optional[Mapping[str, str]] = None,
    leaders: Optional[Dict[str, List[Leader]]] = None,
) -> Dict[str, SeriesLoadResult]:
    """
    Fetch every code at once; one failure doesn't sink the others.

    Returns {code: result} in the order the codes were given. Duplicate
    codes are fetched once.
    """
    names = names or {}
    unique = list(dict.fromkeys(codes))
    results = await asyncio.gather(
        *(
            _load_one(
                provider,
                code,
                start_year,
                end_year,
                names.get(code) or code,
                leaders_for(code, leaders),
            )
            for code in unique
        )
    )
    return {r["code"]: r for r in results}


def loaded_series(results: Mapping[str, SeriesLoadResult]) -> List[CountrySeries]:
    return [r["series"] for r in results.values() if r.get("ok") and r.get("series")]  # type: ignore[misc]


__all__ = ["SelectionGuard", "load_series", "loaded_series"]
