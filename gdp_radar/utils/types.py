"""
gdp_radar/utils/types.py

Shapes of the payloads passed between the provider, the analytics and the
HTTP layer. They are plain dicts so they serialize straight to JSON.
"""

from __future__ import annotations

from typing import Dict, List, Optional, TypedDict


class Country(TypedDict):
    code: str     # World Bank id, e.g. "USA"
    name: str
    region: str


class GDPDataPoint(TypedDict):
    year: int
    value: float   # GDP per capita, current USD
    growth: float  # % change vs previous point in the same series


class Leader(TypedDict):
    name: str
    party: str
    start_year: int
    end_year: int
    policies: List[str]


class CountrySeries(TypedDict):
    id: str
    name: str
    gdp_data: List[GDPDataPoint]
    leaders: List[Leader]


class CountryPoint(TypedDict, total=False):
    value: float
    growth: float


# {"year": 2001, "USA": {"value": ..., "growth": ...}, ...}
AlignedRow = Dict[str, object]


class SeriesLoadResult(TypedDict, total=False):
    code: str
    ok: bool
    series: Optional[CountrySeries]
    error: Optional[str]
