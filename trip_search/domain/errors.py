"""Typed domain errors for trip search.

All errors inherit from TripSearchError and can optionally wrap a
root cause exception for debugging. Interpreter errors never reach the
caller of a search: they are recovered by the rule-based parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TripSearchError(Exception):
    """Base error for the trip search domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class InterpreterUnavailableError(TripSearchError):
    """The semantic oracle could not be reached.

    Covers transport, authentication and timeout failures, and a
    disabled oracle.

    Attributes:
        provider: Name of the oracle implementation
    """

    provider: str = ""


@dataclass
class InterpreterMalformedError(TripSearchError):
    """The oracle answered but the content is not a valid interpretation.

    Attributes:
        raw_content: The response text that failed validation
    """

    raw_content: Optional[str] = field(default=None, repr=False)


@dataclass
class CatalogError(TripSearchError):
    """Catalog loading or data integrity error.

    Attributes:
        file_path: Path to the catalog file if relevant
    """

    file_path: Optional[str] = None


@dataclass
class ConfigurationError(TripSearchError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
    """

    setting_name: str = ""
