"""Keyword and pattern tables for rule-based query parsing.

This module turns an English trip query into a SearchFilters object by
running a fixed, ordered set of rules over the lower-cased text. It is
used both for instant previews and as the fallback whenever the
semantic oracle fails.

Example
-------
    >>> parse_query("Show me safaris under $3,000").to_dict()
    {'maxPrice': 3000, 'types': ['wildlife']}
    >>> parse_query("Adventures longer than 10 days").to_dict()
    {'minDuration': 10, 'types': ['adventure']}
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Pattern, Tuple, Union

from ..domain.models import SearchFilters

Number = Union[int, float]

_AMOUNT = r"\$?\s*(\d+(?:,\d+)*(?:\.\d+)?)"

MAX_PRICE_PATTERN: Pattern[str] = re.compile(
    r"(?:under|below|less than|<)\s*" + _AMOUNT
)
MIN_PRICE_PATTERN: Pattern[str] = re.compile(
    r"(?:over|above|more than|>)\s*" + _AMOUNT
)
MAX_DURATION_PATTERN: Pattern[str] = re.compile(
    r"(?:under|below|less than|shorter than)\s*(\d+)\s*days?"
)
MIN_DURATION_PATTERN: Pattern[str] = re.compile(
    r"(?:over|above|more than|longer than)\s*(\d+)\s*days?"
)

# Ordered: the first key found in the query wins.
TYPE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "safari": ("wildlife",),
    "adventure": ("adventure",),
    "luxury": ("luxury",),
    "cultural": ("cultural",),
    "culture": ("cultural",),
    "beach": ("beach",),
    "mountain": ("mountain",),
    "wellness": ("wellness",),
}

# Ordered: regions before countries, first key found wins.
DESTINATION_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "asia": ("Japan", "Maldives", "Indonesia"),
    "europe": ("Switzerland", "Greece", "Iceland"),
    "africa": ("Kenya", "Morocco"),
    "japan": ("Japan",),
    "maldives": ("Maldives",),
    "indonesia": ("Indonesia",),
    "switzerland": ("Switzerland",),
    "greece": ("Greece",),
    "iceland": ("Iceland",),
    "kenya": ("Kenya",),
    "morocco": ("Morocco",),
    "argentina": ("Argentina",),
}

SEASON_KEYWORDS: Tuple[str, ...] = ("spring", "summer", "fall", "winter")
YEAR_ROUND = "year-round"

# "safari" is left out: it already selects the wildlife type, and no
# catalog activity is labelled with it.
ACTIVITY_KEYWORDS: Tuple[str, ...] = (
    "diving",
    "snorkeling",
    "hiking",
    "yoga",
    "spa",
    "temple",
    "skiing",
)


def _to_number(raw: str) -> Optional[Number]:
    """Parse an amount such as '3,000' or '2500.50'.

    Returns None instead of raising on anything unparsable.
    """
    cleaned = raw.replace(",", "")
    try:
        if "." in cleaned:
            return float(cleaned)
        return int(cleaned)
    except ValueError:
        return None


def _search_number(pattern: Pattern[str], text: str) -> Optional[Number]:
    match = pattern.search(text)
    if match is None:
        return None
    return _to_number(match.group(1))


def _first_keyword(
    table: Dict[str, Tuple[str, ...]], text: str
) -> Optional[Tuple[str, ...]]:
    """Return the values of the first table key contained in text."""
    for keyword, values in table.items():
        if keyword in text:
            return values
    return None


def parse_query(query: str) -> SearchFilters:
    """Extract filters from a free-form query.

    Parameters
    ----------
    query:
        The raw user query.

    Returns
    -------
    SearchFilters
        Filters with every recognised dimension populated. Dimensions
        with no matching rule are left as None.

    Notes
    -----
    Rules are independent: a phrase such as "under 10 days" sets both a
    duration ceiling and a price ceiling of 10.
    """
    text = (query or "").lower()
    filters = SearchFilters()

    filters.max_price = _search_number(MAX_PRICE_PATTERN, text)
    filters.min_price = _search_number(MIN_PRICE_PATTERN, text)

    max_duration = _search_number(MAX_DURATION_PATTERN, text)
    min_duration = _search_number(MIN_DURATION_PATTERN, text)
    filters.max_duration = int(max_duration) if max_duration is not None else None
    filters.min_duration = int(min_duration) if min_duration is not None else None

    filters.types = _first_keyword(TYPE_KEYWORDS, text)
    filters.destinations = _first_keyword(DESTINATION_KEYWORDS, text)

    for season in SEASON_KEYWORDS:
        if season in text:
            filters.seasons = (season, YEAR_ROUND)
            break

    found = tuple(activity for activity in ACTIVITY_KEYWORDS if activity in text)
    if found:
        filters.activities = found

    return filters
