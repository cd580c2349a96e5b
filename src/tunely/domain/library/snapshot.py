"""In-memory catalog snapshot shared by browse and search."""

import sqlite3

from loguru import logger

from .catalog import get_all_tracks
from .models import Track


class CatalogSnapshot:
    """Newest-first list of catalog tracks held in memory.

    Loaded once at start-up and kept current by ``add`` whenever this
    process inserts a track.
    """

    def __init__(self, tracks: list[Track] | None = None):
        self._tracks: list[Track] = list(tracks or [])

    @property
    def tracks(self) -> list[Track]:
        return list(self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def refresh(self, db_conn: sqlite3.Connection) -> None:
        """Reload every track from the catalog store."""
        self._tracks = get_all_tracks(db_conn, newest_first=True)
        logger.info(f"Catalog snapshot loaded: {len(self._tracks)} tracks")

    def add(self, track: Track) -> None:
        """Record a newly inserted track at the front."""
        self._tracks = [track] + [t for t in self._tracks if t.id != track.id]
