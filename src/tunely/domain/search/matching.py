"""Case-insensitive substring matching over catalog tracks."""

from typing import Iterable

from tunely.domain.library.models import Track


def matches_query(track: Track, query: str) -> bool:
    """True if the query occurs in the title, any artist, or the album."""
    needle = query.lower()
    return (
        needle in track.title.lower()
        or any(needle in artist.lower() for artist in track.artists)
        or needle in track.album.lower()
    )


def filter_tracks(tracks: Iterable[Track], query: str) -> list[Track]:
    """Tracks matching ``query``, catalog order preserved."""
    return [track for track in tracks if matches_query(track, query)]
