"""
Catalog store - track records in SQLite.

Functions take an open connection so routers can share the request-scoped
connection from ``get_db``.
"""

import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence

from loguru import logger

from .models import Track


class TrackNotFoundError(Exception):
    """Raised when a track identifier is not in the catalog."""

    def __init__(self, track_id: str):
        super().__init__(f"Track not found: {track_id}")
        self.track_id = track_id


def new_track_id() -> str:
    """Generate a catalog identifier."""
    return uuid.uuid4().hex


def utc_timestamp() -> str:
    """Creation timestamp in UTC ISO-8601."""
    return datetime.now(timezone.utc).isoformat()


def insert_track(
    db_conn: sqlite3.Connection,
    *,
    title: str,
    artists: Sequence[str],
    album: str,
    cover_url: str,
    music_url: str,
    user_id: str,
    user_name: str,
    metadata: str = "",
    track_id: Optional[str] = None,
    created_at: Optional[str] = None,
) -> Track:
    """Insert a track record and return it.

    Raises:
        ValueError: If the artist list is empty
    """
    artist_names = tuple(name.strip() for name in artists if name and name.strip())
    if not artist_names:
        raise ValueError("A track needs at least one artist")

    track = Track(
        id=track_id or new_track_id(),
        title=title,
        artists=artist_names,
        album=album,
        cover_url=cover_url,
        music_url=music_url,
        user_id=user_id,
        user_name=user_name,
        created_at=created_at or utc_timestamp(),
        metadata=metadata or "",
    )

    with db_conn:
        db_conn.execute(
            """
            INSERT INTO tracks (
                id, title, album, cover_url, music_url,
                user_id, user_name, created_at, metadata
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                track.id,
                track.title,
                track.album,
                track.cover_url,
                track.music_url,
                track.user_id,
                track.user_name,
                track.created_at,
                track.metadata,
            ),
        )
        db_conn.executemany(
            "INSERT INTO track_artists (track_id, position, name) VALUES (?, ?, ?)",
            [(track.id, position, name) for position, name in enumerate(track.artists)],
        )

    logger.info(f"Added track {track.id}: {track.artist} - {track.title}")
    return track


def _fetch_artists(db_conn: sqlite3.Connection, track_ids: Sequence[str]) -> dict[str, list[str]]:
    """Batch-fetch ordered artist lists keyed by track id."""
    if not track_ids:
        return {}

    placeholders = ",".join("?" * len(track_ids))
    cursor = db_conn.execute(
        f"""
        SELECT track_id, name FROM track_artists
        WHERE track_id IN ({placeholders})
        ORDER BY track_id, position
        """,
        list(track_ids),
    )

    artists: dict[str, list[str]] = {}
    for row in cursor.fetchall():
        artists.setdefault(row["track_id"], []).append(row["name"])
    return artists


def _rows_to_tracks(db_conn: sqlite3.Connection, rows: list[sqlite3.Row]) -> list[Track]:
    artists_by_track = _fetch_artists(db_conn, [row["id"] for row in rows])
    return [
        Track(
            id=row["id"],
            title=row["title"],
            artists=tuple(artists_by_track.get(row["id"], [])),
            album=row["album"],
            cover_url=row["cover_url"],
            music_url=row["music_url"],
            user_id=row["user_id"],
            user_name=row["user_name"],
            created_at=row["created_at"],
            metadata=row["metadata"] or "",
        )
        for row in rows
    ]


def get_all_tracks(db_conn: sqlite3.Connection, newest_first: bool = True) -> list[Track]:
    """All catalog tracks, ordered by creation time."""
    direction = "DESC" if newest_first else "ASC"
    cursor = db_conn.execute(
        f"SELECT * FROM tracks ORDER BY created_at {direction}, rowid {direction}"
    )
    return _rows_to_tracks(db_conn, cursor.fetchall())


def get_tracks_by_artist(
    db_conn: sqlite3.Connection, artist: str, newest_first: bool = True
) -> list[Track]:
    """Tracks whose artist list contains ``artist`` (exact name match)."""
    direction = "DESC" if newest_first else "ASC"
    cursor = db_conn.execute(
        f"""
        SELECT * FROM tracks
        WHERE EXISTS (
            SELECT 1 FROM track_artists
            WHERE track_artists.track_id = tracks.id AND track_artists.name = ?
        )
        ORDER BY created_at {direction}, rowid {direction}
        """,
        (artist,),
    )
    return _rows_to_tracks(db_conn, cursor.fetchall())


def get_track_by_id(db_conn: sqlite3.Connection, track_id: str) -> Optional[Track]:
    """Single track lookup, None when missing."""
    row = db_conn.execute("SELECT * FROM tracks WHERE id = ?", (track_id,)).fetchone()
    if not row:
        return None
    return _rows_to_tracks(db_conn, [row])[0]


def require_track(db_conn: sqlite3.Connection, track_id: str) -> Track:
    """Single track lookup.

    Raises:
        TrackNotFoundError: If no track has this id
    """
    track = get_track_by_id(db_conn, track_id)
    if track is None:
        raise TrackNotFoundError(track_id)
    return track


def get_tracks_by_ids(
    db_conn: sqlite3.Connection,
    track_ids: Sequence[str],
    preserve_order: bool = True,
) -> list[Track]:
    """Batch-fetch tracks.

    Args:
        db_conn: Database connection
        track_ids: Track IDs to fetch
        preserve_order: If True, returns tracks in the same order as track_ids
            (duplicates kept, unknown ids dropped)

    Returns:
        List of tracks
    """
    if not track_ids:
        return []

    unique_ids = list(dict.fromkeys(track_ids))
    placeholders = ",".join("?" * len(unique_ids))
    cursor = db_conn.execute(
        f"SELECT * FROM tracks WHERE id IN ({placeholders})", unique_ids
    )
    tracks_by_id = {track.id: track for track in _rows_to_tracks(db_conn, cursor.fetchall())}

    if preserve_order:
        return [tracks_by_id[tid] for tid in track_ids if tid in tracks_by_id]
    return list(tracks_by_id.values())
