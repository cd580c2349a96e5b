"""Player router for shared playback control."""

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from tunely.domain.library import TrackNotFoundError, get_tracks_by_ids, require_track
from tunely.domain.playback import PlaybackController, TransportEvent

from ..deps import get_db, get_player
from ..schemas import (
    PlaybackStateOut,
    PlayRequest,
    SeekRequest,
    TransportEventRequest,
    VolumeRequest,
)

router = APIRouter()


def state_out(player: PlaybackController) -> PlaybackStateOut:
    return PlaybackStateOut.model_validate(player.state())


@router.get("/player/state", response_model=PlaybackStateOut)
async def get_state(player: PlaybackController = Depends(get_player)):
    return state_out(player)


@router.post("/player/play", response_model=PlaybackStateOut)
async def play(
    request: PlayRequest,
    db=Depends(get_db),
    player: PlaybackController = Depends(get_player),
):
    """Load a track with its playlist as the new queue."""
    try:
        track = require_track(db, request.track_id)
    except TrackNotFoundError:
        raise HTTPException(404, "Track not found")

    playlist = get_tracks_by_ids(db, request.playlist, preserve_order=True)
    if len(playlist) != len(request.playlist):
        logger.warning(
            f"Play request dropped {len(request.playlist) - len(playlist)} unknown track ids"
        )

    player.play_track(track, playlist)
    return state_out(player)


@router.post("/player/toggle", response_model=PlaybackStateOut)
async def toggle_play(player: PlaybackController = Depends(get_player)):
    player.toggle_play()
    return state_out(player)


@router.post("/player/next", response_model=PlaybackStateOut)
async def next_track(player: PlaybackController = Depends(get_player)):
    player.next()
    return state_out(player)


@router.post("/player/previous", response_model=PlaybackStateOut)
async def previous_track(player: PlaybackController = Depends(get_player)):
    player.previous()
    return state_out(player)


@router.post("/player/shuffle", response_model=PlaybackStateOut)
async def toggle_shuffle(player: PlaybackController = Depends(get_player)):
    player.toggle_shuffle()
    return state_out(player)


@router.post("/player/repeat", response_model=PlaybackStateOut)
async def toggle_repeat(player: PlaybackController = Depends(get_player)):
    player.toggle_repeat()
    return state_out(player)


@router.post("/player/volume", response_model=PlaybackStateOut)
async def set_volume(request: VolumeRequest, player: PlaybackController = Depends(get_player)):
    player.set_volume(request.volume)
    return state_out(player)


@router.post("/player/mute", response_model=PlaybackStateOut)
async def toggle_mute(player: PlaybackController = Depends(get_player)):
    player.toggle_mute()
    return state_out(player)


@router.post("/player/seek", response_model=PlaybackStateOut)
async def seek(request: SeekRequest, player: PlaybackController = Depends(get_player)):
    player.seek(request.position_sec)
    return state_out(player)


@router.post("/player/transport", response_model=PlaybackStateOut)
async def transport_event(
    request: TransportEventRequest, player: PlaybackController = Depends(get_player)
):
    """Device report: track ended, time update or loaded metadata."""
    player.handle_transport_event(
        TransportEvent(
            type=request.type,
            track_id=request.track_id,
            position_sec=request.position_sec,
            duration_sec=request.duration_sec,
        )
    )
    return state_out(player)
