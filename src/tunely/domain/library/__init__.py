"""Library domain - catalog tracks and media access.

This domain handles:
- Track model with derived display fields
- Catalog reads and writes (SQLite)
- Media download for saving tracks locally
"""

from .models import Track, media_extension
from .catalog import (
    TrackNotFoundError,
    new_track_id,
    insert_track,
    get_all_tracks,
    get_tracks_by_artist,
    get_track_by_id,
    require_track,
    get_tracks_by_ids,
)
from .download import DownloadError, MediaDownload, open_media_download
from .snapshot import CatalogSnapshot

__all__ = [
    "Track",
    "media_extension",
    "TrackNotFoundError",
    "new_track_id",
    "insert_track",
    "get_all_tracks",
    "get_tracks_by_artist",
    "get_track_by_id",
    "require_track",
    "get_tracks_by_ids",
    "DownloadError",
    "MediaDownload",
    "open_media_download",
    "CatalogSnapshot",
]
