"""Trip search service - Main orchestrator.

Coordinates parser selection, filtering and ranking. The service holds
no per-search state: it is shared by every caller, and generation
tokens are handed out by each caller's SearchSession (see session.py).
Every failure degrades to a weaker but valid result; no exception
escapes a search.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ..domain.models import (
    FilterSource,
    Interpretation,
    ResultPhase,
    SearchFilters,
    SearchResult,
    Trip,
)
from ..engine.filtering import apply_filters, keyword_scan
from ..engine.ranking import rank_trips
from ..ports.nlp import QueryInterpreterPort, QueryParserPort

NO_MATCH_HINT = (
    "No trips found. Try adjusting your search criteria or browse the full "
    "collection."
)
KEYWORD_SCAN_EXPLANATION = "Fallback search results for: {query}"
EDIT_FAILED_EXPLANATION = "Could not apply the selected filters, showing all trips"


def describe_filter_count(filters: SearchFilters) -> str:
    count = filters.active_count
    if count == 0:
        return ""
    return f"Showing trips with {count} active filter{'s' if count > 1 else ''}"


@dataclass
class TripSearchService:
    """Main service for searching the trip catalog.

    The caller-facing surface is search (async), preview_sync and
    apply_filters (sync), plus preview and the filter-editing helpers
    refine, remove_filter and clear_filters.

    Methods that build a SearchResult take the caller's generation token
    and stamp it on the result. The service never decides staleness
    itself; that is the job of the caller's SearchSession.

    Attributes:
        catalog: Read-only trips, in display order
        parser: Rule-based parser for previews and the fallback path
        interpreter: Semantic interpreter for final results
    """

    catalog: Sequence[Trip]
    parser: QueryParserPort
    interpreter: QueryInterpreterPort

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.catalog = tuple(self.catalog)
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Synchronous API

    def apply_filters(self, filters: SearchFilters) -> List[Trip]:
        """Filter and rank the catalog, without any parsing."""
        return rank_trips(apply_filters(self.catalog, filters), filters)

    def preview_sync(self, query: str) -> List[Trip]:
        """Instant results from the rule-based parser only."""
        if not query or not query.strip():
            return list(self.catalog)
        return self.apply_filters(self.parser.parse(query))

    def preview(self, query: str, generation: int = 0) -> SearchResult:
        """Instant rule-based result, tagged as the "preview" phase."""
        if not query or not query.strip():
            return self.all_trips(generation)
        interpretation = self.parser.parse_with_explanation(query)
        return self._build_result(query, interpretation, generation, "preview")

    def all_trips(self, generation: int = 0) -> SearchResult:
        """The full catalog with no filters, as for an empty search."""
        return SearchResult(
            trips=self.catalog,
            explanation="",
            success=True,
            filters=SearchFilters(),
            generation=generation,
            source="none",
        )

    def refine(self, filters: SearchFilters, generation: int = 0) -> SearchResult:
        """Re-run filtering after a user edit of the filter set."""
        try:
            trips = self.apply_filters(filters)
        except Exception as e:
            self._logger.exception(
                "Filter application failed on user edit",
                extra={"generation": generation},
            )
            return SearchResult(
                trips=self.catalog,
                explanation=EDIT_FAILED_EXPLANATION,
                success=False,
                filters=SearchFilters(),
                error=str(e),
                generation=generation,
                source="none",
            )

        return SearchResult(
            trips=tuple(trips),
            explanation=describe_filter_count(filters),
            success=True,
            filters=filters,
            generation=generation,
            source="user",
            hint=None if trips else NO_MATCH_HINT,
        )

    def remove_filter(
        self, filters: SearchFilters, name: str, generation: int = 0
    ) -> SearchResult:
        """Drop one filter field (attribute or wire name) and refine."""
        return self.refine(filters.without(name), generation)

    def clear_filters(self, generation: int = 0) -> SearchResult:
        """Drop every filter; equivalent to an empty search."""
        return self.all_trips(generation)

    # ------------------------------------------------------------------
    # Asynchronous API

    async def search(self, query: str, generation: int = 0) -> SearchResult:
        """Run a full search and return the final result.

        Args:
            query: Free-form user query.
            generation: Caller's token, copied onto the result.

        Returns:
            The final SearchResult. success is False only when filtering
            itself failed and the keyword scan was used instead.
        """
        if not query or not query.strip():
            self._logger.debug("Empty query, returning the full catalog")
            return self.all_trips(generation)

        self._logger.info(
            "Starting trip search",
            extra={"query_length": len(query), "generation": generation},
        )

        try:
            interpretation = await self.interpreter.interpret(query)
        except Exception as e:
            # interpreters recover internally; this guards foreign ones
            self._logger.warning(
                "Interpreter raised, using rule-based parser",
                extra={"interpreter": type(self.interpreter).__name__, "error": str(e)},
            )
            interpretation = self.parser.parse_with_explanation(query)

        return self._build_result(query, interpretation, generation, "final")

    # ------------------------------------------------------------------
    # Internals

    def _build_result(
        self,
        query: str,
        interpretation: Interpretation,
        generation: int,
        phase: ResultPhase,
    ) -> SearchResult:
        filters = interpretation.filters
        try:
            trips: Tuple[Trip, ...] = tuple(self.apply_filters(filters))
        except Exception as e:
            self._logger.exception(
                "Filtering failed, falling back to keyword scan",
                extra={"generation": generation},
            )
            scanned = tuple(keyword_scan(self.catalog, query))
            return SearchResult(
                trips=scanned,
                explanation=KEYWORD_SCAN_EXPLANATION.format(query=query),
                success=False,
                filters=SearchFilters(),
                error=str(e),
                phase=phase,
                generation=generation,
                source="keyword_scan",
                hint=None if scanned else NO_MATCH_HINT,
            )

        source: FilterSource = interpretation.source
        self._logger.info(
            "Search completed",
            extra={
                "phase": phase,
                "source": source,
                "results": len(trips),
                "generation": generation,
            },
        )

        return SearchResult(
            trips=trips,
            explanation=interpretation.explanation,
            success=True,
            filters=filters,
            phase=phase,
            generation=generation,
            source=source,
            hint=None if trips else NO_MATCH_HINT,
        )
