"""
Music library domain models.

Contains data structures for representing catalog tracks.
"""

from typing import NamedTuple, Optional
from urllib.parse import unquote, urlparse


def media_extension(url: str) -> Optional[str]:
    """File extension of a media URL's path, without the dot.

    Query strings and fragments are ignored, so signed storage URLs such as
    ``.../song.flac?alt=media&token=...`` still resolve to ``flac``.
    """
    path = unquote(urlparse(url).path)
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return None
    ext = name.rsplit(".", 1)[-1]
    return ext or None


class Track(NamedTuple):
    """Represents a track in the shared catalog.

    The identifier is assigned by the catalog store. ``artists`` is ordered
    and never empty; ``music_url`` is a fetchable URL.
    """
    id: str
    title: str
    artists: tuple[str, ...]
    album: str
    cover_url: str
    music_url: str
    user_id: str
    user_name: str
    created_at: str  # UTC ISO-8601
    metadata: str = ""

    @property
    def artist(self) -> str:
        """Display string of all artists."""
        return ", ".join(self.artists)

    @property
    def quality(self) -> Optional[str]:
        """Format label derived from the media file extension (e.g. FLAC)."""
        ext = media_extension(self.music_url)
        return ext.upper() if ext else None

    @property
    def download_filename(self) -> str:
        """Suggested filename when saving the media locally."""
        base = f"{self.title} - {self.artist}"
        ext = media_extension(self.music_url)
        return f"{base}.{ext}" if ext else base

    def to_dict(self) -> dict:
        """Serialize with derived fields included."""
        return {
            "id": self.id,
            "title": self.title,
            "artists": list(self.artists),
            "artist": self.artist,
            "album": self.album,
            "cover_url": self.cover_url,
            "music_url": self.music_url,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "created_at": self.created_at,
            "metadata": self.metadata,
            "quality": self.quality,
        }
