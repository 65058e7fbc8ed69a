"""Prompt construction for the semantic oracle.

The grounding context gives the oracle the whole catalog, the closed
enumerations and five worked examples so that it answers with the exact
filter JSON shape the interpreter validates.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from ..domain.models import Season, Trip, TripType

SYSTEM_PROMPT = (
    "You are a travel search query parser. Always respond with valid JSON only."
)

FEW_SHOT_EXAMPLES: List[Dict[str, Any]] = [
    {
        "query": "Show me safaris under $3,000",
        "response": {
            "filters": {"types": ["wildlife"], "maxPrice": 3000},
            "explanation": "Filtering wildlife/safari trips under $3,000",
        },
    },
    {
        "query": "Luxury trips in Asia",
        "response": {
            "filters": {
                "types": ["luxury"],
                "destinations": ["Japan", "Maldives", "Indonesia"],
            },
            "explanation": "Filtering luxury trips in Asian destinations",
        },
    },
    {
        "query": "Adventures longer than 10 days",
        "response": {
            "filters": {"types": ["adventure"], "minDuration": 10},
            "explanation": "Filtering adventure trips longer than 10 days",
        },
    },
    {
        "query": "Beach destinations for summer",
        "response": {
            "filters": {"types": ["beach"], "seasons": ["summer", "year-round"]},
            "explanation": "Filtering beach trips suitable for summer travel",
        },
    },
    {
        "query": "Cultural experiences in Europe",
        "response": {
            "filters": {
                "types": ["cultural"],
                "destinations": ["Switzerland", "Greece", "Iceland"],
            },
            "explanation": "Filtering cultural trips in European destinations",
        },
    },
]

OUTPUT_FORMAT = """{
  "filters": {
    "maxPrice": number | undefined,
    "minPrice": number | undefined,
    "maxDuration": number | undefined,
    "minDuration": number | undefined,
    "destinations": string[] | undefined,
    "types": string[] | undefined,
    "seasons": string[] | undefined,
    "activities": string[] | undefined,
    "keywords": string[] | undefined
  },
  "explanation": "Brief explanation of how you interpreted the query"
}"""


def _format_price(value: float) -> str:
    return f"${value:,.0f}"


def serialize_trip(trip: Trip) -> str:
    """Render one trip as a text block for the grounding context."""
    return "\n".join(
        [
            f"ID: {trip.id}",
            f"Name: {trip.name}",
            f"Destination: {trip.destination}",
            f"Price: {_format_price(trip.price)}",
            f"Duration: {trip.duration} days",
            f"Type: {trip.type.value}",
            f"Season: {trip.season.value}",
            f"Activities: {', '.join(trip.activities)}",
            f"Description: {trip.description}",
        ]
    )


def build_grounding_context(catalog: Sequence[Trip]) -> str:
    """Describe the schema, the catalog and the expected output.

    Price and duration ranges are computed from the catalog so the
    context stays correct for alternative catalogs.
    """
    types = " | ".join(f"'{t.value}'" for t in TripType)
    seasons = " | ".join(f"'{s.value}'" for s in Season)

    lines = [
        "You are a travel search assistant. You have access to a trips "
        "database with the following structure:",
        "",
        "TRIPS TABLE:",
        "- id: string (unique identifier)",
        "- name: string (trip title)",
        "- destination: string (country/location)",
        "- price: number (USD price)",
        "- duration: number (days)",
        f"- type: {types}",
        f"- season: {seasons}",
        "- activities: string[] (array of activities)",
        "- description: string (detailed description)",
        "",
        "Available trips data:",
        "",
        "\n\n".join(serialize_trip(trip) for trip in catalog),
        "",
        "Key data for filtering:",
    ]

    if catalog:
        prices = [trip.price for trip in catalog]
        durations = [trip.duration for trip in catalog]
        destinations = sorted({trip.destination for trip in catalog})
        lines.extend(
            [
                f"- Destinations: {', '.join(destinations)}",
                f"- Price range: {_format_price(min(prices))} - "
                f"{_format_price(max(prices))}",
                f"- Duration range: {min(durations)} - {max(durations)} days",
            ]
        )
    lines.extend(
        [
            f"- Trip types: {', '.join(t.value for t in TripType)}",
            f"- Seasons: {', '.join(s.value for s in Season)}",
            "- Trips with season 'year-round' suit every season; include "
            "'year-round' whenever you filter by season.",
            "",
            "Your task is to analyze the user's natural language query and "
            "return a JSON object with filtering criteria.",
            "Omit any filter the query does not mention.",
            "Return ONLY valid JSON in this exact format:",
            OUTPUT_FORMAT,
        ]
    )
    return "\n".join(lines)


def format_examples() -> str:
    return "\n\n".join(
        f'Query: "{example["query"]}"\nResponse: {json.dumps(example["response"])}'
        for example in FEW_SHOT_EXAMPLES
    )


def build_messages(catalog: Sequence[Trip], query: str) -> List[Dict[str, str]]:
    """Assemble the chat messages for one interpretation request.

    Args:
        catalog: Trips the oracle may refer to.
        query: The user query.

    Returns:
        A system message and a user message.
    """
    prompt = (
        f"{build_grounding_context(catalog)}\n\n"
        f"Few-shot examples:\n{format_examples()}\n\n"
        f"Now parse this query:\n"
        f"Query: {json.dumps(query)}\n\n"
        f"Remember to return ONLY valid JSON in the specified format."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]
