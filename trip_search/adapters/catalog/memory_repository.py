"""In-memory catalog repository, for tests and alternative catalogs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple

from ...domain.errors import CatalogError
from ...domain.models import Trip


@dataclass
class InMemoryCatalogRepository:
    """Catalog repository over an explicit sequence of trips.

    Example:
        repo = InMemoryCatalogRepository.from_trips([trip_a, trip_b])
        service = TripSearchService(catalog=repo.load(), ...)
    """

    trips: Tuple[Trip, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        self.trips = tuple(self.trips)
        if len({trip.id for trip in self.trips}) != len(self.trips):
            raise CatalogError("Duplicate trip ids in catalog")

    @classmethod
    def from_trips(cls, trips: Iterable[Trip]) -> InMemoryCatalogRepository:
        return cls(trips=tuple(trips))

    def load(self) -> Tuple[Trip, ...]:
        return self.trips
