"""Shared fixtures for domain tests."""

from typing import Callable

import pytest

from tunely.core.database import connect, create_schema
from tunely.domain.library.models import Track


def _build_track(
    track_id: str,
    title: str = "",
    artists: tuple[str, ...] = ("Test Artist",),
    album: str = "Test Album",
    music_url: str = "",
    created_at: str = "2025-01-01T00:00:00+00:00",
) -> Track:
    return Track(
        id=track_id,
        title=title or f"Track {track_id}",
        artists=artists,
        album=album,
        cover_url=f"https://cdn.example.com/covers/{track_id}.jpg",
        music_url=music_url or f"https://cdn.example.com/music/{track_id}.mp3",
        user_id="user-1",
        user_name="Test User",
        created_at=created_at,
    )


@pytest.fixture
def make_track() -> Callable[..., Track]:
    """Factory for catalog tracks with sensible defaults."""
    return _build_track


@pytest.fixture
def abc_tracks() -> list[Track]:
    """Three tracks A, B, C in catalog order."""
    return [_build_track("A"), _build_track("B"), _build_track("C")]


@pytest.fixture
def db_conn(tmp_path):
    """File-backed SQLite catalog with the current schema."""
    conn = connect(tmp_path / "catalog.db")
    create_schema(conn)
    conn.commit()
    yield conn
    conn.close()


@pytest.fixture
def anyio_backend():
    return "asyncio"
