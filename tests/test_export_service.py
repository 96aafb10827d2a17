import json

import pytest

from gdp_radar.services import export_service

SERIES = {
    "id": "DEU",
    "name": "Germany",
    "gdp_data": [
        {"year": 2000, "value": 23000.0, "growth": 0.0},
        {"year": 2001, "value": 23500.5, "growth": 2.17391304},
    ],
    "leaders": [],
}


def test_csv_shape():
    text = export_service.to_csv(SERIES)
    lines = text.splitlines()

    assert len(lines) == 3
    assert lines[0] == "Year,GDP per Capita (USD),Growth Rate (%)"
    assert lines[1] == "2000,23000,0.00"
    assert lines[2] == "2001,23500.5,2.17"


def test_json_payload():
    payload = export_service.to_json_payload(SERIES, (1980, 2023))

    assert payload["country"] == "Germany"
    assert payload["timeRange"] == "1980-2023"
    assert len(payload["data"]) == len(SERIES["gdp_data"])
    assert payload["data"][1] == {"year": 2001, "gdp": 23500.5, "growth": 2.17391304}
    assert json.loads(export_service.to_json(SERIES, (1980, 2023))) == payload


def test_json_non_finite_growth_is_null():
    """A zero previous value gives inf growth; the JSON export must stay strict JSON."""
    series = dict(SERIES)
    series["gdp_data"] = [
        {"year": 2000, "value": 0.0, "growth": 0.0},
        {"year": 2001, "value": 5.0, "growth": float("inf")},
        {"year": 2002, "value": float("nan"), "growth": float("nan")},
    ]
    text = export_service.to_json(series, (2000, 2002))

    def reject(token):
        raise ValueError(f"non-standard JSON constant {token}")

    data = json.loads(text, parse_constant=reject)["data"]
    assert data[1] == {"year": 2001, "gdp": 5.0, "growth": None}
    assert data[2] == {"year": 2002, "gdp": None, "growth": None}


def test_filename():
    assert export_service.export_filename(SERIES, "csv") == "germany-gdp-data.csv"


def test_render_rejects_unknown_format():
    with pytest.raises(ValueError):
        export_service.render(SERIES, (2000, 2001), "xml")
