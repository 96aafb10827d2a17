"""
gdp_radar/services/export_service.py

Serialize one Country Series for download.

JSON:  {"country": name, "timeRange": "1980-2023", "data": [{year, gdp, growth}]}
       (nan/inf gdp or growth is written as null)
CSV:   Year,GDP per Capita (USD),Growth Rate (%)   + one line per point,
       growth at 2 decimals.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Tuple
import csv
import io
import json

from gdp_radar.utils.series_math import finite_or_none
from gdp_radar.utils.types import CountrySeries

ExportFormat = Literal["json", "csv"]

CSV_HEADER = ["Year", "GDP per Capita (USD)", "Growth Rate (%)"]

MEDIA_TYPES: Dict[str, str] = {
    "json": "application/json",
    "csv": "text/csv",
}


def _num(v: float) -> str:
    # 1000.0 -> "1000", 1234.5 -> "1234.5"
    f = float(v)
    if f.is_integer():
        return str(int(f))
    return repr(f)


def to_json_payload(series: CountrySeries, period: Tuple[int, int]) -> Dict[str, Any]:
    return {
        "country": series["name"],
        "timeRange": f"{period[0]}-{period[1]}",
        "data": [
            {"year": p["year"], "gdp": finite_or_none(p["value"]), "growth": finite_or_none(p["growth"])}
            for p in series["gdp_data"]
        ],
    }


def to_json(series: CountrySeries, period: Tuple[int, int]) -> str:
    # non-finite numbers are already null; allow_nan=False keeps it that way
    return json.dumps(to_json_payload(series, period), indent=2, allow_nan=False)


def to_csv(series: CountrySeries) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for p in series["gdp_data"]:
        writer.writerow([p["year"], _num(p["value"]), f"{p['growth']:.2f}"])
    return buf.getvalue().rstrip("\n")


def export_filename(series: CountrySeries, fmt: ExportFormat) -> str:
    return f"{series['name'].lower()}-gdp-data.{fmt}"


def render(series: CountrySeries, period: Tuple[int, int], fmt: ExportFormat) -> str:
    if fmt == "json":
        return to_json(series, period)
    if fmt == "csv":
        return to_csv(series)
    raise ValueError(f"unsupported export format: {fmt!r}")


__all__ = [
    "CSV_HEADER",
    "MEDIA_TYPES",
    "to_json_payload",
    "to_json",
    "to_csv",
    "export_filename",
    "render",
]
