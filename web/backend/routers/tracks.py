"""Catalog router: browse, register and download tracks."""

import asyncio
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from loguru import logger
from starlette.background import BackgroundTask

from tunely.core.config import Config
from tunely.domain.library import (
    CatalogSnapshot,
    DownloadError,
    Track,
    TrackNotFoundError,
    get_all_tracks,
    get_tracks_by_artist,
    insert_track,
    media_extension,
    open_media_download,
    require_track,
)

from ..deps import get_catalog, get_config, get_db, get_sync_manager
from ..schemas import TrackCreate, TrackOut
from ..sync_manager import SyncManager

router = APIRouter()


def track_out(track: Track) -> TrackOut:
    return TrackOut.model_validate(track.to_dict())


def content_disposition(filename: str) -> str:
    """Attachment header with an RFC 5987 UTF-8 filename."""
    ascii_name = filename.encode("ascii", "ignore").decode().replace('"', "")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/tracks", response_model=list[TrackOut])
async def list_tracks(db=Depends(get_db)):
    """All tracks, newest first."""
    return [track_out(track) for track in get_all_tracks(db, newest_first=True)]


@router.post("/tracks", response_model=TrackOut, status_code=201)
async def create_track(
    request: TrackCreate,
    db=Depends(get_db),
    config: Config = Depends(get_config),
    catalog: CatalogSnapshot = Depends(get_catalog),
    sync_manager: SyncManager = Depends(get_sync_manager),
):
    """Register a track whose cover and media are already hosted."""
    ext = (media_extension(request.music_url) or "").lower()
    if ext not in config.catalog.accepted_formats:
        accepted = ", ".join(f".{fmt}" for fmt in config.catalog.accepted_formats)
        raise HTTPException(422, f"Unsupported audio format. Accepted formats: {accepted}")

    track = insert_track(
        db,
        title=request.title,
        artists=request.artists,
        album=request.album,
        cover_url=request.cover_url,
        music_url=request.music_url,
        user_id=request.user_id,
        user_name=request.user_name,
        metadata=request.metadata or "",
    )

    catalog.add(track)
    await sync_manager.broadcast_catalog_update(track)
    return track_out(track)


@router.get("/tracks/{track_id}", response_model=TrackOut)
async def get_track(track_id: str, db=Depends(get_db)):
    try:
        return track_out(require_track(db, track_id))
    except TrackNotFoundError:
        raise HTTPException(404, "Track not found")


@router.get("/artists/{artist_name}/tracks", response_model=list[TrackOut])
async def list_artist_tracks(artist_name: str, db=Depends(get_db)):
    """Tracks crediting this artist (exact name)."""
    return [track_out(track) for track in get_tracks_by_artist(db, artist_name)]


@router.get("/tracks/{track_id}/download")
async def download_track(track_id: str, db=Depends(get_db)):
    """Proxy the media file with an attachment filename."""
    try:
        track = require_track(db, track_id)
    except TrackNotFoundError:
        raise HTTPException(404, "Track not found")

    try:
        download = await asyncio.to_thread(open_media_download, track)
    except DownloadError as e:
        raise HTTPException(502, str(e))

    logger.info(f"Downloading track {track_id} as {download.filename}")
    headers = {"Content-Disposition": content_disposition(download.filename)}
    if download.content_length is not None:
        headers["Content-Length"] = str(download.content_length)
    # Close upstream even if the client leaves before the body starts
    return StreamingResponse(
        download.chunks,
        media_type=download.media_type,
        headers=headers,
        background=BackgroundTask(download.close),
    )
