"""Top-level package for the natural-language trip search project.

A free-form query ("luxury trips in Asia under $3,000") is turned into a
structured filter set by a semantic oracle, with a rule-based parser as
instant preview and fallback. The filters are then applied to the trip
catalog and the survivors ranked.
"""

from .domain.models import SearchFilters, SearchResult, Trip
from .services import SearchSession, TripSearchService

__all__ = ["SearchFilters", "SearchResult", "SearchSession", "Trip", "TripSearchService"]
