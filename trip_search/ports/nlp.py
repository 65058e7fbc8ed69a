"""NLP ports - Abstractions for turning query text into filters.

These protocols define the contracts for query interpretation, allowing
the rule-based parser, the oracle-backed interpreter and test stubs to
be swapped without changing the search orchestration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import Interpretation, SearchFilters


class QueryParserPort(Protocol):
    """Port for synchronous, total query parsing.

    Implementations:
    - adapters/nlp/rule_based.py (RuleBasedQueryParser)

    Parsers never raise: an unrecognised query simply yields empty
    filters.
    """

    def parse(self, query: str) -> SearchFilters:
        """Extract structured filters from a query.

        Args:
            query: Free-form user query.

        Returns:
            SearchFilters with the recognised fields populated.
        """
        ...

    def parse_with_explanation(self, query: str) -> Interpretation:
        """Parse a query and attach a generic explanation.

        Args:
            query: Free-form user query.

        Returns:
            Interpretation with source "rule_based".
        """
        ...


class ChatOraclePort(Protocol):
    """Port for the external semantic oracle (a chat-completion model).

    Implementations:
    - adapters/nlp/openai_oracle.py (OpenAIChatOracle)

    The oracle is unreliable: implementations raise
    InterpreterUnavailableError on transport failures and
    InterpreterMalformedError on empty responses.
    """

    async def complete(
        self,
        messages: Sequence[Mapping[str, str]],
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Send one chat request and return the text of the reply.

        Args:
            messages: Chat messages with "role" and "content" keys.
            temperature: Sampling temperature.
            max_tokens: Upper bound on the response length.

        Returns:
            The raw response text.
        """
        ...


class QueryInterpreterPort(Protocol):
    """Port for asynchronous query interpretation.

    Implementations:
    - services/interpreter.py (SemanticInterpreter)

    Interpreters always return an Interpretation; failures of the
    underlying oracle are recovered internally.
    """

    async def interpret(self, query: str) -> Interpretation:
        """Interpret a query into filters and an explanation.

        Args:
            query: Free-form user query.

        Returns:
            Interpretation of the query.
        """
        ...
