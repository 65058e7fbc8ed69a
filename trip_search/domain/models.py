"""Domain models for trip search.

Trips are immutable catalog records. SearchFilters is the structured
filter set produced by the query parsers and edited by the user; it is
transient and owned by a single search. SearchResult and Interpretation
are the values handed back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Literal, Mapping, Optional, Tuple


class TripType(str, Enum):
    """Closed set of trip categories."""

    ADVENTURE = "adventure"
    LUXURY = "luxury"
    CULTURAL = "cultural"
    WILDLIFE = "wildlife"
    BEACH = "beach"
    MOUNTAIN = "mountain"
    WELLNESS = "wellness"


class Season(str, Enum):
    """Closed set of travel seasons.

    YEAR_ROUND trips qualify for any season filter.
    """

    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"
    YEAR_ROUND = "year-round"


FilterSource = Literal["oracle", "rule_based", "user", "none", "keyword_scan"]
ResultPhase = Literal["preview", "final"]


@dataclass(frozen=True, slots=True)
class Trip:
    """A bookable trip from the catalog.

    Attributes:
        id: Unique trip identifier
        name: Trip title
        destination: Country or location
        price: Price in currency units (USD in the bundled catalog)
        duration: Length of the trip in days
        type: Trip category
        season: Best season to travel
        activities: Ordered activity labels
        description: Free-text description
        image: Optional picture URL, display only
    """

    id: str
    name: str
    destination: str
    price: float
    duration: int
    type: TripType
    season: Season
    activities: Tuple[str, ...] = field(default_factory=tuple)
    description: str = ""
    image: Optional[str] = None

    def __post_init__(self) -> None:
        """Coerce enum and sequence fields, then validate numeric fields.

        Raises:
            ValueError: On an unknown type or season, or a non-positive
                price or duration.
        """
        object.__setattr__(self, "type", TripType(self.type))
        object.__setattr__(self, "season", Season(self.season))
        object.__setattr__(self, "activities", tuple(self.activities))
        if self.price <= 0:
            raise ValueError(f"Trip price must be positive, got {self.price}")
        if self.duration <= 0:
            raise ValueError(
                f"Trip duration must be positive, got {self.duration}"
            )


# Python attribute name -> wire (camelCase) name
_WIRE_NAMES: Dict[str, str] = {
    "max_price": "maxPrice",
    "min_price": "minPrice",
    "max_duration": "maxDuration",
    "min_duration": "minDuration",
    "destinations": "destinations",
    "types": "types",
    "seasons": "seasons",
    "activities": "activities",
    "keywords": "keywords",
}
_ATTR_NAMES: Dict[str, str] = {wire: attr for attr, wire in _WIRE_NAMES.items()}
_SEQUENCE_FIELDS = frozenset(
    {"destinations", "types", "seasons", "activities", "keywords"}
)


@dataclass
class SearchFilters:
    """Structured filter set for one search.

    A field left as None places no constraint on that dimension. An empty
    tuple is a constraint that no trip satisfies. Populated fields are
    combined with AND; values inside a multi-valued field with OR.
    """

    max_price: Optional[float] = None
    min_price: Optional[float] = None
    max_duration: Optional[int] = None
    min_duration: Optional[int] = None
    destinations: Optional[Tuple[str, ...]] = None
    types: Optional[Tuple[str, ...]] = None
    seasons: Optional[Tuple[str, ...]] = None
    activities: Optional[Tuple[str, ...]] = None
    keywords: Optional[Tuple[str, ...]] = None

    @property
    def has_price_bound(self) -> bool:
        return self.max_price is not None or self.min_price is not None

    @property
    def has_duration_bound(self) -> bool:
        return self.max_duration is not None or self.min_duration is not None

    def active_fields(self) -> Tuple[str, ...]:
        """Return the names of populated fields, in declaration order."""
        return tuple(f.name for f in fields(self) if getattr(self, f.name) is not None)

    @property
    def active_count(self) -> int:
        return len(self.active_fields())

    @property
    def is_empty(self) -> bool:
        return self.active_count == 0

    def without(self, name: str) -> SearchFilters:
        """Return a copy with one field cleared.

        Accepts either the attribute name or its wire name.

        Raises:
            KeyError: If the name is not a filter field.
        """
        attr = _ATTR_NAMES.get(name, name)
        if attr not in _WIRE_NAMES:
            raise KeyError(f"Unknown filter field: {name}")
        return replace(self, **{attr: None})

    def to_dict(self) -> Dict[str, Any]:
        """Serialize populated fields using wire (camelCase) names."""
        out: Dict[str, Any] = {}
        for attr, wire in _WIRE_NAMES.items():
            value = getattr(self, attr)
            if value is None:
                continue
            out[wire] = list(value) if attr in _SEQUENCE_FIELDS else value
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchFilters:
        """Build filters from a wire-form or attribute-form mapping.

        Unknown keys and None values are ignored.
        """
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            attr = _ATTR_NAMES.get(key, key)
            if attr not in _WIRE_NAMES or value is None:
                continue
            if attr in _SEQUENCE_FIELDS:
                if isinstance(value, str):
                    value = (value,)
                kwargs[attr] = tuple(str(v) for v in value)
            else:
                kwargs[attr] = value
        return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class Interpretation:
    """Filters derived from a query, with a human-readable explanation.

    Attributes:
        filters: The structured filters
        explanation: How the query was understood
        source: Which interpreter produced the filters
    """

    filters: SearchFilters
    explanation: str
    source: FilterSource = "rule_based"


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Outcome of one search, preview or final.

    Attributes:
        trips: Filtered and ranked trips
        explanation: Human-readable explanation of the filters
        success: False only when the core itself failed
        filters: The filters actually applied
        error: Internal error description on core failure
        phase: "preview" for the instant rule-based result, else "final"
        generation: Token of the search that produced this result
        source: Which producer made the filters
        hint: User guidance when nothing matched
    """

    trips: Tuple[Trip, ...]
    explanation: str
    success: bool
    filters: SearchFilters = field(default_factory=SearchFilters)
    error: Optional[str] = None
    phase: ResultPhase = "final"
    generation: int = 0
    source: FilterSource = "none"
    hint: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """Check if no trip matched."""
        return len(self.trips) == 0

    @property
    def count(self) -> int:
        return len(self.trips)
