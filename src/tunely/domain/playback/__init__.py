"""Playback domain - shared player session and queue state machine.

This domain handles:
- Playback session state (queue, original order, modes, volume)
- Transport operations (play, next, previous, shuffle, repeat, volume, mute)
- Event interface to and from audio-rendering devices
"""

from .session import NEXT_REPEAT_MODE, PlaybackSession, RepeatMode
from .events import (
    EventChannel,
    PlayerEvent,
    PlayerListener,
    TransportEvent,
)
from .controller import PlaybackController

__all__ = [
    "NEXT_REPEAT_MODE",
    "PlaybackSession",
    "RepeatMode",
    "EventChannel",
    "PlayerEvent",
    "PlayerListener",
    "TransportEvent",
    "PlaybackController",
]
