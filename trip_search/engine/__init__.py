from .filtering import apply_filters, keyword_scan
from .ranking import rank_trips

__all__ = ["apply_filters", "keyword_scan", "rank_trips"]
