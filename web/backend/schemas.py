from typing import Any, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase JSON while accepting snake_case too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def camelize(value: Any) -> Any:
    """Recursively convert dict keys to camelCase for WebSocket payloads."""
    if isinstance(value, dict):
        return {to_camel(key): camelize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [camelize(item) for item in value]
    return value


def _require_http_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be an http(s) URL")
    return value


class TrackOut(CamelModel):
    id: str
    title: str
    artists: list[str]
    artist: str
    album: str
    cover_url: str
    music_url: str
    user_id: str
    user_name: str
    created_at: str
    metadata: str = ""
    quality: Optional[str] = None


class TrackCreate(CamelModel):
    """Track record registration (media already hosted)."""

    title: str = Field(min_length=1)
    artists: list[str] = Field(min_length=1)
    album: str = Field(min_length=1)
    cover_url: str
    music_url: str
    user_id: str = Field(min_length=1)
    user_name: str = Field(min_length=1)
    metadata: Optional[str] = ""

    @field_validator("title", "album", "user_id", "user_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("artists")
    @classmethod
    def artist_names_not_blank(cls, value: list[str]) -> list[str]:
        names = [name.strip() for name in value]
        if any(not name for name in names):
            raise ValueError("Artist name is required.")
        return names

    @field_validator("cover_url", "music_url")
    @classmethod
    def http_url(cls, value: str) -> str:
        return _require_http_url(value.strip())


class PlayRequest(CamelModel):
    """Request to start playback of a track within a playlist."""

    track_id: str
    playlist: list[str] = Field(default_factory=list)


class VolumeRequest(CamelModel):
    volume: float


class SeekRequest(CamelModel):
    position_sec: float


class TransportEventRequest(CamelModel):
    """Report from the audio element of a device."""

    type: Literal["ended", "time_update", "loaded_metadata"]
    track_id: str
    position_sec: float = 0.0
    duration_sec: Optional[float] = None


class PlaybackStateOut(CamelModel):
    """Current playback state."""

    current_track: Optional[TrackOut] = None
    is_playing: bool = False
    queue: list[TrackOut] = []
    queue_index: int = -1
    shuffling: bool = False
    repeat_mode: Literal["off", "all", "one"] = "off"
    volume: float = 1.0
    muted: bool = False
    effective_gain: float = 1.0
    position_sec: float = 0.0
    duration_sec: Optional[float] = None


class SearchRequest(CamelModel):
    query: str


class SearchResponse(CamelModel):
    query: str
    corrected_query: Optional[str] = None
    search_intent: Optional[Literal["artist", "album", "song", "general"]] = None
    used_fallback: bool = False
    tracks: list[TrackOut]
