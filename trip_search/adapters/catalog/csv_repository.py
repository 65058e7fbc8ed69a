"""CSV catalog repository adapter.

Loads the trip catalog from a CSV file with:
- Configuration injection (path from config)
- Load-once caching
- Typed errors for malformed rows
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from ...config import CatalogConfig, get_config
from ...domain.errors import CatalogError
from ...domain.models import Season, Trip, TripType

ACTIVITY_SEPARATOR = ";"


@dataclass
class CSVCatalogRepository:
    """Catalog repository that loads trips from a CSV file.

    Expected columns: trip_id, name, destination, price, duration, type,
    season, activities (separated by ';'), description, image (optional).

    Attributes:
        config: Catalog configuration (data directory, file name)
    """

    config: CatalogConfig = field(default_factory=lambda: get_config().catalog)
    _logger: logging.Logger = field(init=False, repr=False)

    # Cached data
    _trips: Optional[Tuple[Trip, ...]] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def load(self) -> Tuple[Trip, ...]:
        """Load the catalog from CSV.

        Returns:
            Trips in file order.

        Raises:
            CatalogError: If the file cannot be read or a row is invalid.
        """
        if self._trips is not None:
            return self._trips

        path = self.config.catalog_path
        self._logger.debug("Loading catalog", extra={"path": str(path)})

        try:
            trips = self._load_trips_from_csv()
        except (OSError, KeyError, ValueError) as e:
            raise CatalogError(
                f"Failed to load catalog: {e}",
                file_path=str(path),
                cause=e,
            )

        ids = [trip.id for trip in trips]
        if len(set(ids)) != len(ids):
            raise CatalogError(
                "Duplicate trip ids in catalog",
                file_path=str(path),
            )

        self._trips = tuple(trips)
        self._logger.info("Catalog loaded", extra={"trips": len(self._trips)})
        return self._trips

    def _load_trips_from_csv(self) -> List[Trip]:
        """Internal method to read and convert every row."""
        trips: List[Trip] = []
        with self.config.catalog_path.open(encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            for row in reader:
                trip_id = (row.get("trip_id") or "").strip()
                if not trip_id:
                    continue
                trips.append(_row_to_trip(trip_id, row))
        return trips


def _row_to_trip(trip_id: str, row: Mapping[str, Optional[str]]) -> Trip:
    activities = tuple(
        a.strip()
        for a in (row.get("activities") or "").split(ACTIVITY_SEPARATOR)
        if a.strip()
    )
    image = (row.get("image") or "").strip() or None
    return Trip(
        id=trip_id,
        name=(row["name"] or "").strip(),
        destination=(row["destination"] or "").strip(),
        price=float(row["price"] or ""),
        duration=int(row["duration"] or ""),
        type=TripType((row["type"] or "").strip().lower()),
        season=Season((row["season"] or "").strip().lower()),
        activities=activities,
        description=(row.get("description") or "").strip(),
        image=image,
    )
