import asyncio
import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger

from tunely.domain.playback import TransportEvent
from tunely.domain.search import Debouncer, SearchResult, search_tracks_async

from .search import search_response

router = APIRouter()

TRANSPORT_MESSAGES = {
    "transport:ended": "ended",
    "transport:time_update": "time_update",
    "transport:loaded_metadata": "loaded_metadata",
}


def _to_transport_event(msg_type: str, data: dict) -> TransportEvent:
    """Build a transport event from a WebSocket payload.

    Raises:
        KeyError: If ``trackId`` is missing
        ValueError: If a number field is not numeric
    """
    duration = data.get("durationSec")
    return TransportEvent(
        type=TRANSPORT_MESSAGES[msg_type],
        track_id=str(data["trackId"]),
        position_sec=float(data.get("positionSec", 0.0)),
        duration_sec=float(duration) if duration is not None else None,
    )


@router.websocket("/ws/sync")
async def sync_websocket(websocket: WebSocket):
    """WebSocket endpoint for real-time state synchronization.

    Devices register, report transport events from their audio element and
    send search-as-you-type queries. Each connection has its own debouncer,
    so only the latest query's results are sent back.
    """
    state = websocket.app.state
    sync_manager = state.sync_manager
    player = state.player

    await sync_manager.connect(websocket)
    device_id = None
    debouncer = Debouncer(window_sec=state.config.search.debounce_ms / 1000)
    pending: set[asyncio.Task] = set()

    async def send_results(result: SearchResult) -> None:
        await websocket.send_json({
            "type": "search:results",
            "data": search_response(result).model_dump(by_alias=True),
        })

    try:
        await websocket.send_json({
            "type": "sync:full",
            "data": sync_manager.get_current_state(),
        })

        while True:
            message = await websocket.receive_text()
            try:
                data = json.loads(message)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON from WebSocket: {message}")
                continue
            if not isinstance(data, dict):
                logger.warning(f"Ignoring non-object WebSocket message: {message}")
                continue

            msg_type = data.get("type")

            if msg_type == "device:register":
                device_id = data.get("id")
                device_name = data.get("name", "Unknown Device")
                if device_id:
                    await sync_manager.register_device(device_id, device_name, websocket)
                    logger.info(f"Device registered: {device_id} ({device_name})")

            elif msg_type in TRANSPORT_MESSAGES:
                try:
                    event = _to_transport_event(msg_type, data.get("data") or {})
                except (AttributeError, KeyError, TypeError, ValueError):
                    logger.warning(f"Malformed transport message: {message}")
                    continue
                player.handle_transport_event(event)

            elif msg_type == "search:query":
                query = str((data.get("data") or {}).get("query", ""))
                snapshot = state.catalog.tracks
                task = asyncio.create_task(
                    debouncer.submit(
                        lambda snapshot=snapshot, query=query: search_tracks_async(
                            snapshot, query, state.normalizer
                        ),
                        send_results,
                    )
                )
                pending.add(task)
                task.add_done_callback(pending.discard)

            else:
                logger.debug(f"Ignoring WebSocket message type: {msg_type}")

    except WebSocketDisconnect:
        logger.debug("WebSocket closed by client")
    finally:
        sync_manager.disconnect(websocket)
        debouncer.cancel()
        for task in list(pending):
            task.cancel()

        if device_id:
            logger.info(f"Device disconnected, starting grace period: {device_id}")
            await sync_manager.unregister_device(device_id)
