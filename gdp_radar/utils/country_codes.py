# gdp_radar/utils/country_codes.py
from __future__ import annotations
from typing import Dict, Iterable, Optional
import re

import pycountry

from gdp_radar.utils.types import Country

# Names people type that pycountry won't match, plus World Bank ids that
# are not ISO 3166 alpha-3 codes.
_ALIASES: Dict[str, str] = {
    "usa":            "USA",
    "us":             "USA",
    "u.s.":           "USA",
    "uk":             "GBR",
    "u.k.":           "GBR",
    "britain":        "GBR",
    "south korea":    "KOR",
    "north korea":    "PRK",
    "russia":         "RUS",
    "turkey":         "TUR",
    "kosovo":         "XKX",
    "channel islands": "CHI",
}


def _norm(text: str) -> str:
    t = re.sub(r"[\u200b\s]+", " ", (text or "")).strip().lower()
    return t.replace("’", "'")


def resolve_code(identifier: str, countries: Optional[Iterable[Country]] = None) -> Optional[str]:
    """
    Map a code or a country name to the World Bank id (ISO alpha-3 for most).

    Order: fetched country list (code or exact name), alias table,
    pycountry lookup, then a bare 3-letter code as-is. None when nothing fits.
    """
    if not identifier or not identifier.strip():
        return None
    raw = identifier.strip()
    key = _norm(raw)

    if countries is not None:
        for c in countries:
            if c["code"].lower() == key or _norm(c["name"]) == key:
                return c["code"]

    if key in _ALIASES:
        return _ALIASES[key]

    try:
        return pycountry.countries.lookup(raw).alpha_3
    except LookupError:
        pass

    if len(raw) == 3 and raw.isalpha():
        return raw.upper()
    return None


__all__ = ["resolve_code"]
