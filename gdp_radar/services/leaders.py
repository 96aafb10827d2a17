# gdp_radar/services/leaders.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from gdp_radar.utils.types import Leader

# Sample tenure annotations. Supplied data, not derived from the GDP series.
SAMPLE_LEADERS: Dict[str, List[Leader]] = {
    "USA": [
        {
            "name": "Jimmy Carter",
            "party": "Democratic",
            "start_year": 1980,
            "end_year": 1981,
            "policies": ["Energy policy", "Deregulation"],
        },
        {
            "name": "Ronald Reagan",
            "party": "Republican",
            "start_year": 1981,
            "end_year": 1989,
            "policies": ["Reaganomics", "Tax cuts"],
        },
    ],
}


def leaders_for(code: str, source: Optional[Dict[str, List[Leader]]] = None) -> List[Leader]:
    data = SAMPLE_LEADERS if source is None else source
    return list(data.get(code.upper(), []))


def leader_for_year(leaders: Sequence[Leader], year: int) -> Optional[Leader]:
    """First leader whose inclusive tenure covers the year (handover years go to the outgoing one)."""
    for ld in leaders:
        if ld["start_year"] <= year <= ld["end_year"]:
            return ld
    return None
