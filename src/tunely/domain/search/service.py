"""
Search over the in-memory catalog snapshot.

The query is normalized by the language model when available; any failure
falls back to the raw lower-cased query so users never see an error.
"""

import asyncio
from typing import NamedTuple, Optional, Sequence

from loguru import logger

from tunely.domain.library.models import Track

from .matching import filter_tracks
from .normalizer import AIError, QueryNormalizer


class SearchResult(NamedTuple):
    """Outcome of one search."""

    query: str
    tracks: list[Track]
    corrected_query: Optional[str] = None
    search_intent: Optional[str] = None
    used_fallback: bool = False


def search_tracks(
    tracks: Sequence[Track],
    raw_query: str,
    normalizer: Optional[QueryNormalizer] = None,
) -> SearchResult:
    """Filter ``tracks`` by ``raw_query``.

    Args:
        tracks: Catalog snapshot
        raw_query: Text as typed by the user
        normalizer: Query normalizer, or None to use basic search only

    Returns:
        SearchResult; an empty query returns every track
    """
    if raw_query.strip() == "":
        return SearchResult(query=raw_query, tracks=list(tracks))

    if normalizer is not None:
        try:
            normalized = normalizer.normalize(raw_query)
            corrected = normalized.corrected_query.lower()
            return SearchResult(
                query=raw_query,
                tracks=filter_tracks(tracks, corrected),
                corrected_query=normalized.corrected_query,
                search_intent=normalized.search_intent,
            )
        except AIError as e:
            logger.warning(f"AI search failed, falling back to basic search: {e}")
        except Exception:
            logger.exception("AI search failed unexpectedly, falling back to basic search")

    basic_query = raw_query.lower()
    return SearchResult(
        query=raw_query,
        tracks=filter_tracks(tracks, basic_query),
        used_fallback=True,
    )


async def search_tracks_async(
    tracks: Sequence[Track],
    raw_query: str,
    normalizer: Optional[QueryNormalizer] = None,
) -> SearchResult:
    """``search_tracks`` with the blocking model call moved off the event loop."""
    return await asyncio.to_thread(search_tracks, tracks, raw_query, normalizer)
