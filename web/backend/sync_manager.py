import asyncio
import time
from typing import Any, Optional

from fastapi import WebSocket
from loguru import logger

from tunely.domain.library.models import Track
from tunely.domain.playback import EventChannel, PlaybackController

from .schemas import camelize

DISCONNECT_GRACE_SEC = 30.0


class SyncManager:
    """Manages WebSocket connections and broadcasts state updates.

    Connected devices render audio for the shared player: they receive
    playback events and report transport events back. Handles a device
    registry with a grace period for disconnects.
    """

    def __init__(
        self,
        player: Optional[PlaybackController] = None,
        grace_sec: float = DISCONNECT_GRACE_SEC,
    ):
        self.player = player
        self.grace_sec = grace_sec
        self.connections: list[WebSocket] = []
        # Device registry: {device_id: {id, name, connected_at, ws}}
        self.devices: dict[str, dict[str, Any]] = {}
        # Disconnect grace timers: {device_id: asyncio.Task}
        self.disconnect_timers: dict[str, asyncio.Task] = {}

    async def connect(self, ws: WebSocket) -> None:
        """Accept and store a new WebSocket connection."""
        await ws.accept()
        self.connections.append(ws)

    def disconnect(self, ws: WebSocket) -> None:
        """Remove a WebSocket connection."""
        if ws in self.connections:
            self.connections.remove(ws)

    async def register_device(self, device_id: str, device_name: str, ws: WebSocket) -> None:
        """Register a device or reconnect existing device (cancels grace timer)."""
        if device_id in self.disconnect_timers:
            self.disconnect_timers[device_id].cancel()
            del self.disconnect_timers[device_id]

        self.devices[device_id] = {
            "id": device_id,
            "name": device_name,
            "connected_at": time.time(),
            "ws": ws,
        }

        await self.broadcast_device_list()

    async def unregister_device(self, device_id: str) -> None:
        """Start grace period for device disconnect."""
        async def remove_after_grace():
            await asyncio.sleep(self.grace_sec)
            self.disconnect_timers.pop(device_id, None)
            if device_id not in self.devices:
                return
            del self.devices[device_id]
            await self.broadcast_device_list()

            # Nothing left to render audio: pause instead of playing into the void
            if not self.devices and self.player and self.player.session.is_playing:
                logger.info("Last device gone, pausing playback")
                self.player.toggle_play()

        self.disconnect_timers[device_id] = asyncio.create_task(remove_after_grace())

    def get_current_state(self) -> dict:
        """Get current application state for new connections."""
        playback = self.player.state() if self.player else None
        return {
            "playback": camelize(playback) if playback else None,
            "devices": self._device_list(),
        }

    def _device_list(self) -> list[dict]:
        return [
            {
                "id": device_id,
                "name": device_info["name"],
                "connectedAt": device_info["connected_at"],
            }
            for device_id, device_info in self.devices.items()
        ]

    async def broadcast_device_list(self) -> None:
        """Broadcast updated device list to all clients."""
        await self.broadcast("devices:updated", {"devices": self._device_list()})

    async def broadcast_catalog_update(self, track: Track) -> None:
        """Tell clients a track was added so browse views can refresh."""
        await self.broadcast("catalog:updated", camelize({"track": track.to_dict()}))

    async def broadcast(self, event_type: str, data: dict) -> None:
        """Send a message to all connected clients."""
        message = {
            "type": event_type,
            "data": data,
            "ts": time.time(),
        }
        dead_connections: list[WebSocket] = []

        for conn in self.connections:
            try:
                await conn.send_json(message)
            except Exception:
                dead_connections.append(conn)

        for conn in dead_connections:
            self.connections.remove(conn)

    async def pump(self, channel: EventChannel) -> None:
        """Forward player events from the channel to every client until cancelled."""
        async for event in channel:
            await self.broadcast(event.type, camelize(event.data))

    def shutdown(self) -> None:
        """Cancel pending grace timers."""
        for task in self.disconnect_timers.values():
            task.cancel()
        self.disconnect_timers.clear()
