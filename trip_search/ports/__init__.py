"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the search core and external
adapters. They enable dependency injection and make the system testable.
"""

from .catalog import CatalogRepositoryPort
from .nlp import ChatOraclePort, QueryInterpreterPort, QueryParserPort

__all__ = [
    # Catalog
    "CatalogRepositoryPort",
    # NLP
    "QueryParserPort",
    "QueryInterpreterPort",
    "ChatOraclePort",
]
