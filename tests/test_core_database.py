#!/usr/bin/env python3
"""Tests for database functions."""

from pathlib import Path

from tunely.core.config import CatalogConfig
from tunely.core.database import (
    connect,
    get_database_path,
    get_schema_version,
    init_database,
)


def test_database_path_from_config(tmp_path):
    """Configured database_path wins over the data directory."""
    config = CatalogConfig(database_path=str(tmp_path / "custom.db"))
    assert get_database_path(config) == tmp_path / "custom.db"


def test_database_path_defaults_to_data_dir(monkeypatch, tmp_path):
    """Without a configured path the database lives in TUNELY_DATA_DIR."""
    monkeypatch.setenv("TUNELY_DATA_DIR", str(tmp_path))
    assert get_database_path(CatalogConfig()) == Path(tmp_path) / "tunely.db"


def test_schema_version_of_fresh_database(tmp_path):
    """A database without the version table reports version 0."""
    conn = connect(tmp_path / "empty.db")
    try:
        assert get_schema_version(conn) == 0
    finally:
        conn.close()


def test_deleting_track_cascades_to_artists(tmp_path):
    """Artist rows go away with their track."""
    db_path = tmp_path / "tunely.db"
    init_database(db_path)

    conn = connect(db_path)
    try:
        with conn:
            conn.execute(
                "INSERT INTO tracks (id, title, album, cover_url, music_url, user_id, "
                "user_name, created_at) VALUES ('t1', 'T', 'A', 'c', 'm', 'u', 'n', 'now')"
            )
            conn.execute("INSERT INTO track_artists VALUES ('t1', 0, 'Artist')")
        with conn:
            conn.execute("DELETE FROM tracks WHERE id = 't1'")

        count = conn.execute("SELECT COUNT(*) FROM track_artists").fetchone()[0]
        assert count == 0
    finally:
        conn.close()
