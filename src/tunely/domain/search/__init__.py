"""Search domain - query normalization and catalog filtering.

This domain handles:
- Language-model query correction and intent labelling
- Case-insensitive substring matching over title, artists and album
- Fallback to basic search when the model is unavailable or fails
- Latest-wins debouncing for search-as-you-type
"""

from .normalizer import (
    AIError,
    NormalizedQuery,
    QueryNormalizer,
    SearchIntent,
    create_normalizer,
    parse_normalizer_output,
)
from .matching import filter_tracks, matches_query
from .service import SearchResult, search_tracks, search_tracks_async
from .debounce import Debouncer

__all__ = [
    "AIError",
    "NormalizedQuery",
    "QueryNormalizer",
    "SearchIntent",
    "create_normalizer",
    "parse_normalizer_output",
    "filter_tracks",
    "matches_query",
    "SearchResult",
    "search_tracks",
    "search_tracks_async",
    "Debouncer",
]
