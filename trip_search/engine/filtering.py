"""Filter engine: apply a SearchFilters object to a trip catalog.

Filtering is pure and stable: surviving trips keep their catalog order.
Each populated filter field is an independent predicate and a trip must
pass all of them. Inside a multi-valued field any value may match.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..domain.models import SearchFilters, Season, Trip

logger = logging.getLogger(__name__)

Predicate = Callable[[Trip], bool]


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def _matches_destination(trip: Trip, destinations: Tuple[str, ...]) -> bool:
    return any(_contains(trip.destination, dest) for dest in destinations)


def _matches_type(trip: Trip, types: Tuple[str, ...]) -> bool:
    return any(trip.type.value == t.lower() for t in types)


def _matches_season(trip: Trip, seasons: Tuple[str, ...]) -> bool:
    # year-round trips pass any non-empty season filter
    return any(
        trip.season is Season.YEAR_ROUND or trip.season.value == s.lower()
        for s in seasons
    )


def _matches_activity(trip: Trip, activities: Tuple[str, ...]) -> bool:
    return any(
        _contains(trip_activity, wanted) or _contains(wanted, trip_activity)
        for wanted in activities
        for trip_activity in trip.activities
    )


def _matches_keyword(trip: Trip, keywords: Tuple[str, ...]) -> bool:
    return any(
        _contains(trip.name, kw)
        or _contains(trip.description, kw)
        or _contains(trip.destination, kw)
        for kw in keywords
    )


def build_predicates(filters: SearchFilters) -> List[Predicate]:
    """Translate populated filter fields into trip predicates.

    Numeric bounds are inclusive: a trip priced exactly at max_price
    passes.
    """
    predicates: List[Predicate] = []

    max_price, min_price = filters.max_price, filters.min_price
    max_duration, min_duration = filters.max_duration, filters.min_duration
    destinations, types = filters.destinations, filters.types
    seasons, activities = filters.seasons, filters.activities
    keywords = filters.keywords

    if max_price is not None:
        predicates.append(lambda trip: trip.price <= max_price)
    if min_price is not None:
        predicates.append(lambda trip: trip.price >= min_price)
    if max_duration is not None:
        predicates.append(lambda trip: trip.duration <= max_duration)
    if min_duration is not None:
        predicates.append(lambda trip: trip.duration >= min_duration)
    if types is not None:
        predicates.append(lambda trip: _matches_type(trip, types))
    if destinations is not None:
        predicates.append(lambda trip: _matches_destination(trip, destinations))
    if seasons is not None:
        predicates.append(lambda trip: _matches_season(trip, seasons))
    if activities is not None:
        predicates.append(lambda trip: _matches_activity(trip, activities))
    if keywords is not None:
        predicates.append(lambda trip: _matches_keyword(trip, keywords))

    return predicates


def apply_filters(catalog: Iterable[Trip], filters: SearchFilters) -> List[Trip]:
    """Return the trips that satisfy every populated filter.

    Args:
        catalog: Trips to filter, in display order.
        filters: The filters to apply.

    Returns:
        The surviving trips, in input order.
    """
    predicates = build_predicates(filters)
    survivors = [trip for trip in catalog if all(p(trip) for p in predicates)]

    logger.debug(
        "Filters applied",
        extra={"filters": filters.to_dict(), "survivors": len(survivors)},
    )
    return survivors


def keyword_scan(catalog: Sequence[Trip], query: Optional[str]) -> List[Trip]:
    """Last-resort search: substring match of the raw query.

    Looks for the whole query, case-insensitively, in each trip's name,
    destination, description and activities. Structured constraints
    (type, season, price, duration) are not considered.
    """
    needle = (query or "").strip()
    return [
        trip
        for trip in catalog
        if _contains(trip.name, needle)
        or _contains(trip.destination, needle)
        or _contains(trip.description, needle)
        or any(_contains(activity, needle) for activity in trip.activities)
    ]
