"""Ranking stage: order filtered trips by the active filter dimensions."""

from __future__ import annotations

from typing import Iterable, List

from ..domain.models import SearchFilters, Trip


def rank_trips(trips: Iterable[Trip], filters: SearchFilters) -> List[Trip]:
    """Sort trips according to which bounds were requested.

    Price bound -> cheapest first. Otherwise duration bound -> longest
    first. Otherwise cheapest first. The sort is stable, so equal keys
    keep their input order.
    """
    if filters.has_price_bound:
        return sorted(trips, key=lambda trip: trip.price)
    if filters.has_duration_bound:
        return sorted(trips, key=lambda trip: trip.duration, reverse=True)
    return sorted(trips, key=lambda trip: trip.price)
