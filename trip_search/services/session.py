"""Per-caller search session.

A SearchSession belongs to one caller (one browser tab in the Gradio
demo) and owns that caller's generation counter. Searches and filter
edits in one session supersede each other, latest wins; sessions never
affect one another, and the wrapped TripSearchService stays shared and
stateless.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import AsyncIterator, Union

from ..domain.models import SearchFilters, SearchResult
from .search_service import TripSearchService


@dataclass
class SearchSession:
    """Generation tokens and two-phase delivery for one caller.

    Attributes:
        service: The shared search service
    """

    service: TripSearchService

    _generation: int = field(default=0, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def begin(self) -> int:
        """Start a new search and return its generation token."""
        with self._lock:
            self._generation += 1
            return self._generation

    @property
    def current_generation(self) -> int:
        return self._generation

    def is_current(self, token: Union[int, SearchResult]) -> bool:
        """Check whether a token (or a result's token) is the latest."""
        generation = token.generation if isinstance(token, SearchResult) else token
        return generation == self._generation

    async def search(self, query: str) -> SearchResult:
        """Final result only; supersedes earlier searches in this session."""
        return await self.service.search(query, self.begin())

    async def search_stream(self, query: str) -> AsyncIterator[SearchResult]:
        """Yield the instant preview, then the final result.

        The final result is dropped if another search or filter edit in
        this session started while the interpreter was running.
        """
        generation = self.begin()

        preview = self.service.preview(query, generation)
        yield preview
        if not query or not query.strip():
            return

        result = await self.service.search(query, generation)
        if not self.is_current(generation):
            self._logger.info(
                "Discarding stale search result",
                extra={"generation": generation, "current": self._generation},
            )
            return
        yield result

    def refine(self, filters: SearchFilters) -> SearchResult:
        """Apply an edited filter set; supersedes any search in flight."""
        return self.service.refine(filters, self.begin())

    def remove_filter(self, filters: SearchFilters, name: str) -> SearchResult:
        return self.service.remove_filter(filters, name, self.begin())

    def clear_filters(self) -> SearchResult:
        return self.service.clear_filters(self.begin())
