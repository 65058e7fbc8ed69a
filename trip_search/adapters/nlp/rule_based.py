"""Rule-based query parser adapter.

This adapter wraps the pattern tables from nlp/query_patterns.py with
the QueryParserPort interface.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ...domain.models import Interpretation, SearchFilters
from ...nlp.query_patterns import parse_query

FALLBACK_EXPLANATION = "Fallback parsing applied basic keyword matching for: {query}"


@dataclass
class RuleBasedQueryParser:
    """Deterministic keyword/regex parser.

    Implements QueryParserPort. Pure and total: it never raises and an
    unrecognised query yields empty filters.
    """

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def parse(self, query: str) -> SearchFilters:
        """Extract structured filters from a query.

        Args:
            query: Free-form user query.

        Returns:
            SearchFilters with the recognised fields populated.
        """
        filters = parse_query(query)

        self._logger.debug(
            "Query parsed (rule-based)",
            extra={"query_length": len(query or ""), "filters": filters.to_dict()},
        )

        return filters

    def parse_with_explanation(self, query: str) -> Interpretation:
        return Interpretation(
            filters=self.parse(query),
            explanation=FALLBACK_EXPLANATION.format(query=query),
            source="rule_based",
        )
