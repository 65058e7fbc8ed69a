"""Domain layer - Core models and errors.

This module contains the catalog and filter models and the typed
errors used throughout the application. No external dependencies.
"""

from .errors import (
    CatalogError,
    ConfigurationError,
    InterpreterMalformedError,
    InterpreterUnavailableError,
    TripSearchError,
)
from .models import (
    Interpretation,
    SearchFilters,
    SearchResult,
    Season,
    Trip,
    TripType,
)

__all__ = [
    # Models
    "Trip",
    "TripType",
    "Season",
    "SearchFilters",
    "SearchResult",
    "Interpretation",
    # Errors
    "TripSearchError",
    "InterpreterUnavailableError",
    "InterpreterMalformedError",
    "CatalogError",
    "ConfigurationError",
]
