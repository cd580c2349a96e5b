"""
Playback session state.

One session exists per running backend. It starts empty, is mutated only by
``PlaybackController`` and is never persisted.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from tunely.domain.library.models import Track

RepeatMode = Literal["off", "all", "one"]

# off -> all -> one -> off
NEXT_REPEAT_MODE: dict[str, RepeatMode] = {
    "off": "all",
    "all": "one",
    "one": "off",
}


@dataclass
class PlaybackSession:
    """Mutable state of the shared player.

    ``queue`` is the active playback order; ``original_queue`` keeps the
    pre-shuffle order so shuffle can be undone exactly. ``muted`` is
    independent of ``volume``.
    """

    current_track: Optional[Track] = None
    is_playing: bool = False
    queue: list[Track] = field(default_factory=list)
    original_queue: list[Track] = field(default_factory=list)
    shuffling: bool = False
    repeat_mode: RepeatMode = "off"
    volume: float = 1.0
    muted: bool = False
    position_sec: float = 0.0
    duration_sec: Optional[float] = None

    @property
    def effective_gain(self) -> float:
        """Output gain the audio element should apply."""
        return 0.0 if self.muted else self.volume

    def index_of_current(self) -> int:
        """Position of the current track in ``queue`` by id, -1 if absent."""
        if self.current_track is None:
            return -1
        for i, track in enumerate(self.queue):
            if track.id == self.current_track.id:
                return i
        return -1

    def to_dict(self) -> dict[str, Any]:
        """Snapshot for API responses and device broadcasts."""
        return {
            "current_track": self.current_track.to_dict() if self.current_track else None,
            "is_playing": self.is_playing,
            "queue": [track.to_dict() for track in self.queue],
            "queue_index": self.index_of_current(),
            "shuffling": self.shuffling,
            "repeat_mode": self.repeat_mode,
            "volume": self.volume,
            "muted": self.muted,
            "effective_gain": self.effective_gain,
            "position_sec": self.position_sec,
            "duration_sec": self.duration_sec,
        }
