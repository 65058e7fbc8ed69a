"""Catalog adapters - Implementations of CatalogRepositoryPort."""

from .csv_repository import CSVCatalogRepository
from .memory_repository import InMemoryCatalogRepository

__all__ = ["CSVCatalogRepository", "InMemoryCatalogRepository"]
