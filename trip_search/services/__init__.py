"""Services layer - Application orchestration.

Available services:
- TripSearchService: Main search orchestrator (preview, search, edits)
- SearchSession: Per-caller generation tokens and two-phase delivery
- SemanticInterpreter: Oracle-backed interpretation with fallback
"""

from .interpreter import SemanticInterpreter, parse_oracle_response
from .search_service import TripSearchService
from .session import SearchSession

__all__ = [
    "TripSearchService",
    "SearchSession",
    "SemanticInterpreter",
    "parse_oracle_response",
]
