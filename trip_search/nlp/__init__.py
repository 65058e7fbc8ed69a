"""NLP helpers: rule tables for query parsing and oracle prompts."""

from .prompts import build_messages
from .query_patterns import parse_query

__all__ = ["parse_query", "build_messages"]
