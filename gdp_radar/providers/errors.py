# gdp_radar/providers/errors.py
from __future__ import annotations


class FetchError(Exception):
    """Remote call failed, or came back in a shape we can't use."""


class NoDataError(FetchError):
    """Indicator query returned no records for the country/range."""


__all__ = ["FetchError", "NoDataError"]
