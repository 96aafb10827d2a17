"""
gdp_radar/providers/wb_schemas.py

Validated shapes for World Bank v2 responses.

Every endpoint answers with a two element JSON array:

    [ {page, pages, per_page, total, ...}, [record, record, ...] ]

Error answers are a one element array holding a ``message`` list, and
"no data" answers carry ``null`` in the second slot. Records that fail
validation are dropped here so nothing downstream sees a half-parsed row.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gdp_radar.providers.errors import FetchError

T = TypeVar("T", bound=BaseModel)


class WBPageMeta(BaseModel):
    model_config = ConfigDict(extra="ignore")

    page: Optional[int] = None
    pages: Optional[int] = None
    per_page: Optional[int] = None
    total: Optional[int] = None


class WBRegion(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    value: str = ""


class WBCountryRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str
    region: WBRegion = Field(default_factory=WBRegion)
    capital_city: Optional[str] = Field(default=None, alias="capitalCity")

    @property
    def is_sovereign(self) -> bool:
        # regions and income groups come back with an empty capital
        return bool(self.capital_city and self.capital_city.strip())


class WBIndicatorRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    year: int = Field(alias="date")
    value: Optional[float] = None


def split_envelope(payload: Any) -> Tuple[WBPageMeta, Optional[List[Any]]]:
    """Return (page meta, raw records or None). Raises FetchError on a bad envelope."""
    if not isinstance(payload, list) or not payload:
        raise FetchError(f"unexpected response type: {type(payload).__name__}")

    head = payload[0] if isinstance(payload[0], dict) else {}
    if "message" in head:
        msgs = head.get("message") or []
        text = "; ".join(
            str(m.get("value") or m.get("key") or m) if isinstance(m, dict) else str(m)
            for m in msgs
        )
        raise FetchError(f"service error: {text or 'unknown'}")

    try:
        meta = WBPageMeta.model_validate(head)
    except ValidationError as e:
        raise FetchError(f"malformed page metadata: {e}") from e

    if len(payload) < 2 or payload[1] is None:
        return meta, None
    records = payload[1]
    if not isinstance(records, list):
        raise FetchError(f"records slot is {type(records).__name__}, expected list")
    return meta, records


def parse_records(records: List[Any], model: Type[T]) -> List[T]:
    """Validate each raw record, skipping the ones that don't fit."""
    out: List[T] = []
    for row in records:
        try:
            out.append(model.model_validate(row))
        except ValidationError:
            continue
    return out


__all__ = [
    "WBPageMeta",
    "WBRegion",
    "WBCountryRecord",
    "WBIndicatorRecord",
    "split_envelope",
    "parse_records",
]
