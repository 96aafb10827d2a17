from __future__ import annotations

from typing import Any, Dict, List, Optional, Set

import httpx
import pytest

from gdp_radar.providers.wb_provider import WorldBankProvider
from gdp_radar.utils.ttl_cache import TTLCache


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def wb_page(records: Optional[List[Dict[str, Any]]]) -> List[Any]:
    total = len(records) if records else 0
    return [{"page": 1, "pages": 1, "per_page": "100", "total": total}, records]


def gdp_records(points: Dict[int, Optional[float]]) -> List[Dict[str, Any]]:
    # newest first, like the real service
    return [
        {"indicator": {"id": "NY.GDP.PCAP.CD"}, "date": str(y), "value": v}
        for y, v in sorted(points.items(), reverse=True)
    ]


class FakeWorldBank:
    """Stands in for api.worldbank.org behind httpx.MockTransport."""

    def __init__(self) -> None:
        self.calls: List[httpx.Request] = []
        self.failing: Set[str] = set()
        self.countries: List[Dict[str, Any]] = [
            {"id": "USA", "name": "United States", "region": {"id": "NAC", "value": "North America"}, "capitalCity": "Washington D.C."},
            {"id": "DEU", "name": "Germany", "region": {"id": "ECS", "value": "Europe & Central Asia"}, "capitalCity": "Berlin"},
            {"id": "KOR", "name": "Korea, Rep.", "region": {"id": "EAS", "value": "East Asia & Pacific"}, "capitalCity": "Seoul"},
            {"id": "EUU", "name": "European Union", "region": {"id": "NA", "value": "Aggregates"}, "capitalCity": ""},
            {"id": "HIC", "name": "High income", "region": {"id": "NA", "value": "Aggregates"}, "capitalCity": None},
        ]
        self.gdp: Dict[str, Dict[int, Optional[float]]] = {
            "USA": {2000: 36000.0, 2001: 37000.0, 2002: 38000.0},
            "DEU": {2000: 23000.0, 2001: 23500.0, 2002: 25000.0},
            "KOR": {2000: 12000.0, 2001: 11500.0, 2002: 13000.0},
        }

    def gdp_calls(self, code: str) -> int:
        return sum(1 for r in self.calls if f"/country/{code}/indicator/" in r.url.path)

    def country_list_calls(self) -> int:
        return sum(1 for r in self.calls if r.url.path.endswith("/country"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        parts = request.url.path.strip("/").split("/")
        # ["v2", "country"] or ["v2", "country", CODE, "indicator", IND]
        if parts[1:] == ["country"]:
            if "countries" in self.failing:
                return httpx.Response(503, text="down")
            return httpx.Response(200, json=wb_page(self.countries))

        code = parts[2]
        if code in self.failing:
            return httpx.Response(500, text="boom")
        if code not in self.gdp:
            return httpx.Response(200, json=wb_page(None))

        lo, hi = (int(x) for x in request.url.params["date"].split(":"))
        pts = {y: v for y, v in self.gdp[code].items() if lo <= y <= hi}
        return httpx.Response(200, json=wb_page(gdp_records(pts) or None))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_wb() -> FakeWorldBank:
    return FakeWorldBank()


@pytest.fixture
def provider(fake_wb: FakeWorldBank, clock: FakeClock) -> WorldBankProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_wb.handler))
    return WorldBankProvider(client=client, cache=TTLCache(clock=clock))
