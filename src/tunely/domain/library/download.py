"""
Media download - fetch a track's media URL for saving locally.
"""

from typing import Callable, Iterator, NamedTuple, Optional

import requests
from loguru import logger

from .models import Track

CHUNK_SIZE = 64 * 1024
DEFAULT_TIMEOUT = (10, 60)  # connect, read


class DownloadError(Exception):
    """Raised when the media for a track cannot be fetched."""

    pass


class MediaDownload(NamedTuple):
    """An open media fetch ready to be streamed to a client.

    ``close`` releases the upstream connection. It is safe to call after the
    body was fully consumed.
    """

    filename: str
    media_type: str
    content_length: Optional[int]
    chunks: Iterator[bytes]
    close: Callable[[], None]


def _iter_and_close(response: requests.Response) -> Iterator[bytes]:
    try:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if chunk:
                yield chunk
    finally:
        response.close()


def open_media_download(
    track: Track, session: Optional[requests.Session] = None
) -> MediaDownload:
    """Start fetching a track's media.

    Args:
        track: Track whose ``music_url`` is fetched
        session: Optional requests session (tests inject a mock)

    Returns:
        MediaDownload with a lazily consumed body

    Raises:
        DownloadError: On network errors or a non-2xx upstream status
    """
    http = session or requests.Session()
    try:
        response = http.get(track.music_url, stream=True, timeout=DEFAULT_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Download failed for track {track.id}: {e}")
        raise DownloadError(f"Could not fetch media for {track.title}") from e

    length = response.headers.get("Content-Length")
    return MediaDownload(
        filename=track.download_filename,
        media_type=response.headers.get("Content-Type", "application/octet-stream"),
        content_length=int(length) if length and length.isdigit() else None,
        chunks=_iter_and_close(response),
        close=response.close,
    )
