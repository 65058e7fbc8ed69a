"""Catalog port - Abstraction for reading the trip catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Tuple

if TYPE_CHECKING:
    from ..domain.models import Trip


class CatalogRepositoryPort(Protocol):
    """Port for loading the read-only trip catalog.

    Implementations:
    - adapters/catalog/csv_repository.py (CSVCatalogRepository)
    - adapters/catalog/memory_repository.py (InMemoryCatalogRepository)

    The catalog is loaded once and never mutated; callers receive an
    immutable, ordered tuple.
    """

    def load(self) -> Tuple[Trip, ...]:
        """Load the catalog.

        Returns:
            Trips in catalog order.
        """
        ...
