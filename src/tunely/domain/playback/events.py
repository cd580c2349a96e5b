"""
Messages exchanged between the playback controller and audio devices.

``PlayerEvent`` flows out of the controller to whoever renders audio;
``TransportEvent`` flows back in when a device reports progress or the end
of a track.
"""

import asyncio
from typing import Any, Callable, Literal, NamedTuple, Optional

from loguru import logger

PlayerEventType = Literal["playback:state", "playback:restart", "playback:seek"]
TransportEventType = Literal["ended", "time_update", "loaded_metadata"]


class PlayerEvent(NamedTuple):
    """Outbound notification from the controller."""

    type: PlayerEventType
    data: dict[str, Any]


class TransportEvent(NamedTuple):
    """Inbound report from an audio-rendering device.

    ``track_id`` names the track the device was rendering. Every connected
    device renders the same track, so one track end can arrive several
    times, and reports can arrive after the controller has moved on.
    """

    type: TransportEventType
    track_id: str
    position_sec: float = 0.0
    duration_sec: Optional[float] = None


PlayerListener = Callable[[PlayerEvent], None]


class EventChannel:
    """Async queue bridging synchronous controller events to the event loop.

    The controller publishes without awaiting; a consumer task drains the
    channel with ``async for``.
    """

    def __init__(self, maxsize: int = 1000):
        self._queue: asyncio.Queue[PlayerEvent] = asyncio.Queue(maxsize=maxsize)

    def publish(self, event: PlayerEvent) -> None:
        """Enqueue an event, dropping the oldest one when full."""
        if self._queue.full():
            dropped = self._queue.get_nowait()
            logger.warning(f"Event channel full, dropped {dropped.type}")
        self._queue.put_nowait(event)

    # Controller listeners are plain callables
    __call__ = publish

    async def get(self) -> PlayerEvent:
        return await self._queue.get()

    def qsize(self) -> int:
        return self._queue.qsize()

    def __aiter__(self):
        return self

    async def __anext__(self) -> PlayerEvent:
        return await self._queue.get()
