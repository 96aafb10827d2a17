# gdp_radar/services/analytics.py — year alignment + two-country comparison
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from math import isfinite

from gdp_radar.utils.series_math import finite_or_none, mean, safe_ratio
from gdp_radar.utils.types import AlignedRow, CountryPoint, CountrySeries, GDPDataPoint

Period = Tuple[int, int]


@dataclass
class Overtake:
    year: int
    country: str


@dataclass
class ComparisonMetrics:
    starting_ratio: float
    ending_ratio: float
    average_growth_diff: float
    overtakes: List[Overtake] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view: non-finite numbers become None."""
        return {
            "starting_ratio": finite_or_none(self.starting_ratio),
            "ending_ratio": finite_or_none(self.ending_ratio),
            "average_growth_diff": finite_or_none(self.average_growth_diff),
            "overtakes": [{"year": o.year, "country": o.country} for o in self.overtakes],
        }


def _in_period(year: int, period: Period) -> bool:
    return period[0] <= year <= period[1]


def filter_period(series: CountrySeries, period: Period) -> List[GDPDataPoint]:
    """Points of a single series inside the closed year range."""
    return [p for p in series["gdp_data"] if _in_period(p["year"], period)]


def align(series: Sequence[CountrySeries], period: Period) -> List[AlignedRow]:
    """
    One row per distinct year (within period) found in any series, ascending.

    A country's key is left out of a row when it has no point that year.
    """
    by_country: List[Tuple[str, Dict[int, GDPDataPoint]]] = [
        (s["id"], {p["year"]: p for p in s["gdp_data"]}) for s in series
    ]
    years = sorted({y for _, pts in by_country for y in pts if _in_period(y, period)})

    rows: List[AlignedRow] = []
    for y in years:
        row: AlignedRow = {"year": y}
        for cid, pts in by_country:
            p = pts.get(y)
            if p is None:
                continue
            cell: CountryPoint = {"value": p["value"], "growth": p["growth"]}
            row[cid] = cell
        rows.append(row)
    return rows


def _field(row: AlignedRow, cid: str, name: str) -> Optional[float]:
    cell = row.get(cid)
    if not isinstance(cell, dict):
        return None
    return cell.get(name)


def _ratio(row: AlignedRow, a: str, b: str) -> float:
    return safe_ratio(_field(row, a, "value"), _field(row, b, "value"))


def _growth_diff(row: AlignedRow, a: str, b: str) -> float:
    ga, gb = _field(row, a, "growth"), _field(row, b, "growth")
    if ga is None or gb is None:
        return float("nan")
    return ga - gb


def compare(series_a: CountrySeries, series_b: CountrySeries, rows: Sequence[AlignedRow]) -> ComparisonMetrics:
    """
    Metrics for two aligned series, a vs b.

    Ratios are value(a) / value(b). A zero or missing denominator shows up
    as nan/inf in the result instead of raising.
    """
    a, b = series_a["id"], series_b["id"]
    if not rows:
        nan = float("nan")
        return ComparisonMetrics(nan, nan, nan, [])

    overtakes: List[Overtake] = []
    diffs: List[float] = []
    prev: Optional[float] = None
    for i, row in enumerate(rows):
        cur = _ratio(row, a, b)
        if i > 0:
            diffs.append(_growth_diff(row, a, b))
        if not isfinite(cur):
            continue
        if prev is not None:
            if prev < 1 < cur:
                overtakes.append(Overtake(year=int(row["year"]), country=series_a["name"]))
            elif prev > 1 > cur:
                overtakes.append(Overtake(year=int(row["year"]), country=series_b["name"]))
        prev = cur

    return ComparisonMetrics(
        starting_ratio=_ratio(rows[0], a, b),
        ending_ratio=_ratio(rows[-1], a, b),
        average_growth_diff=mean(diffs),
        overtakes=overtakes,
    )


__all__ = ["Overtake", "ComparisonMetrics", "filter_period", "align", "compare"]
