"""
SQLite database operations for Tunely
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import CatalogConfig, get_data_dir


# Database schema version for migrations
SCHEMA_VERSION = 1


def get_database_path(catalog_config: Optional[CatalogConfig] = None) -> Path:
    """Get the path to the SQLite database file."""
    if catalog_config and catalog_config.database_path:
        return Path(catalog_config.database_path)
    return get_data_dir() / "tunely.db"


def connect(db_path: Path | str) -> sqlite3.Connection:
    """Open a connection with dict-like rows and foreign keys enforced."""
    conn = sqlite3.connect(db_path, timeout=30.0, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_db_connection(db_path: Optional[Path] = None):
    """Get a database connection with proper cleanup and concurrency support."""
    conn = connect(db_path or get_database_path())

    # WAL mode allows reads during writes
    conn.execute("PRAGMA journal_mode=WAL")

    try:
        yield conn
    finally:
        conn.close()


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables for the current schema version."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS tracks (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            album TEXT NOT NULL,
            cover_url TEXT NOT NULL,
            music_url TEXT NOT NULL,
            user_id TEXT NOT NULL,
            user_name TEXT NOT NULL,
            created_at TEXT NOT NULL,
            metadata TEXT NOT NULL DEFAULT ''
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS track_artists (
            track_id TEXT NOT NULL,
            position INTEGER NOT NULL,
            name TEXT NOT NULL,
            PRIMARY KEY (track_id, position),
            FOREIGN KEY (track_id) REFERENCES tracks (id) ON DELETE CASCADE
        )
    """)

    conn.execute("CREATE INDEX IF NOT EXISTS idx_tracks_created_at ON tracks (created_at)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_track_artists_name ON track_artists (name)")


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Return the stored schema version, 0 for a fresh database."""
    try:
        row = conn.execute("SELECT MAX(version) AS version FROM schema_version").fetchone()
    except sqlite3.OperationalError:
        return 0
    return row["version"] or 0


def init_database(db_path: Optional[Path] = None) -> None:
    """Initialize the database with the required tables."""
    path = db_path or get_database_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection(path) as conn:
        current_version = get_schema_version(conn)
        if current_version < SCHEMA_VERSION:
            create_schema(conn)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            conn.commit()
            logger.info(f"Database schema at version {SCHEMA_VERSION}: {path}")
