"""Semantic interpreter with explicit fallback handling.

The interpreter asks the chat oracle to translate a query into filters
and validates the reply strictly. Any failure (oracle disabled or
unreachable, empty reply, invalid JSON, schema violation) is logged and
recovered by the rule-based parser, so interpretation never fails.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..config import OracleConfig, get_config
from ..domain.errors import InterpreterMalformedError
from ..domain.models import Interpretation, SearchFilters, Season, Trip, TripType
from ..nlp.prompts import build_messages
from ..ports.nlp import ChatOraclePort, QueryParserPort

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class FiltersPayload(BaseModel):
    """Filter object as the oracle must return it."""

    model_config = ConfigDict(extra="forbid")

    maxPrice: Optional[float] = Field(default=None, ge=0)
    minPrice: Optional[float] = Field(default=None, ge=0)
    maxDuration: Optional[int] = Field(default=None, ge=0)
    minDuration: Optional[int] = Field(default=None, ge=0)
    destinations: Optional[List[str]] = None
    types: Optional[List[TripType]] = None
    seasons: Optional[List[Season]] = None
    activities: Optional[List[str]] = None
    keywords: Optional[List[str]] = None

    @field_validator("types", "seasons", mode="before")
    @classmethod
    def _normalize_enum_values(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [v.strip().lower() if isinstance(v, str) else v for v in value]
        return value

    def to_filters(self) -> SearchFilters:
        """Convert to domain filters; empty lists mean no constraint."""

        def _tuple(values: Optional[Sequence[Any]]) -> Optional[tuple]:
            if not values:
                return None
            return tuple(v.value if isinstance(v, (TripType, Season)) else v for v in values)

        return SearchFilters(
            max_price=self.maxPrice,
            min_price=self.minPrice,
            max_duration=self.maxDuration,
            min_duration=self.minDuration,
            destinations=_tuple(self.destinations),
            types=_tuple(self.types),
            seasons=_tuple(self.seasons),
            activities=_tuple(self.activities),
            keywords=_tuple(self.keywords),
        )


class InterpretationPayload(BaseModel):
    """Top-level oracle reply: filters plus an explanation."""

    filters: FiltersPayload
    explanation: str = Field(min_length=1)


def parse_oracle_response(content: str) -> Interpretation:
    """Validate raw oracle text and convert it to an Interpretation.

    A surrounding markdown code fence is tolerated.

    Raises:
        InterpreterMalformedError: If the content is not valid JSON or
            does not match the expected schema.
    """
    text = (content or "").strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    if not text:
        raise InterpreterMalformedError("Empty oracle response", raw_content=content)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InterpreterMalformedError(
            "Oracle response is not valid JSON", cause=e, raw_content=content
        )

    try:
        payload = InterpretationPayload.model_validate(data)
    except ValidationError as e:
        raise InterpreterMalformedError(
            "Oracle response does not match the filter schema",
            cause=e,
            raw_content=content,
        )

    return Interpretation(
        filters=payload.filters.to_filters(),
        explanation=payload.explanation.strip(),
        source="oracle",
    )


@dataclass
class SemanticInterpreter:
    """Oracle-backed query interpreter with rule-based fallback.

    Implements QueryInterpreterPort.

    Attributes:
        catalog: Trips used to ground the oracle
        fallback: Parser used whenever the oracle fails
        oracle: Chat oracle; None means always use the fallback
        config: Oracle configuration (temperature, max tokens)
    """

    catalog: Sequence[Trip]
    fallback: QueryParserPort
    oracle: Optional[ChatOraclePort] = None
    config: OracleConfig = field(default_factory=lambda: get_config().oracle)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def interpret(self, query: str) -> Interpretation:
        """Interpret a query, falling back to the rule-based parser.

        Exactly one oracle attempt is made; there are no retries.

        Args:
            query: Free-form user query.

        Returns:
            Interpretation from the oracle, or from the fallback parser.
        """
        fallback_name = type(self.fallback).__name__

        if self.oracle is None:
            self._logger.info(
                "No semantic oracle configured, using fallback",
                extra={"fallback": fallback_name},
            )
            return self.fallback.parse_with_explanation(query)

        oracle_name = type(self.oracle).__name__

        try:
            messages = build_messages(self.catalog, query)
            content = await self.oracle.complete(
                messages,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
            interpretation = parse_oracle_response(content)
        except Exception as e:
            self._logger.warning(
                "Semantic interpretation failed, using fallback",
                extra={
                    "oracle": oracle_name,
                    "fallback": fallback_name,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
            )
            return self.fallback.parse_with_explanation(query)

        self._logger.info(
            "Query interpreted by oracle",
            extra={
                "oracle": oracle_name,
                "filters": interpretation.filters.to_dict(),
            },
        )
        return interpretation
