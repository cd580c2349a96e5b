"""
Playback queue controller.

Owns the single ``PlaybackSession`` and implements the transport operations
(play, next, previous, shuffle, repeat, volume). Audio is rendered elsewhere:
the controller publishes ``PlayerEvent``s to subscribed listeners and reacts
to ``TransportEvent``s reported back by the rendering device.
"""

import random
from typing import Callable, Optional, Sequence

from loguru import logger

from tunely.domain.library.models import Track

from .events import PlayerEvent, PlayerListener, TransportEvent
from .session import NEXT_REPEAT_MODE, PlaybackSession


class PlaybackController:
    """Queue/transport state machine for the shared player.

    Construct once at application start and hand the instance to consumers.
    All operations are synchronous; on a single event loop each transition
    is atomic.
    """

    def __init__(
        self,
        session: Optional[PlaybackSession] = None,
        rng: Optional[random.Random] = None,
        volume: float = 1.0,
    ):
        self.session = session or PlaybackSession(volume=_clamp_volume(volume))
        self._rng = rng or random.Random()
        self._listeners: list[PlayerListener] = []

    # Observers

    def subscribe(self, listener: PlayerListener) -> Callable[[], None]:
        """Register a listener for player events. Returns an unsubscribe function."""
        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event_type: str, data: dict) -> None:
        event = PlayerEvent(event_type, data)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Player listener failed on {event_type}")

    def _publish_state(self) -> None:
        self._emit("playback:state", self.session.to_dict())

    def state(self) -> dict:
        """Current session snapshot."""
        return self.session.to_dict()

    # Transport operations

    def play_track(self, track: Track, playlist: Sequence[Track]) -> None:
        """Load ``track`` with ``playlist`` as the new queue and start playing.

        The playlist is taken verbatim as both queue and original queue.
        ``track`` is not required to be in it; see ``next``/``previous``.
        """
        if track is None:
            raise ValueError("play_track requires a track")

        s = self.session
        s.current_track = track
        s.queue = list(playlist)
        s.original_queue = list(playlist)
        s.is_playing = True
        s.position_sec = 0.0
        s.duration_sec = None

        logger.info(f"Playing {track.artist} - {track.title} ({len(s.queue)} in queue)")
        self._publish_state()

    def toggle_play(self) -> None:
        """Flip play/pause; no-op when nothing is loaded."""
        s = self.session
        if s.current_track is None:
            return
        s.is_playing = not s.is_playing
        self._publish_state()

    def next(self) -> None:
        """Advance to the next track.

        Repeat "one" while playing restarts the current track instead. At the
        end of the queue, repeat "all" wraps to the first track; otherwise
        playback stops and the current track stays loaded. A current track
        missing from the queue counts as index -1, so the first track plays.
        """
        s = self.session
        if s.current_track is None:
            return

        if s.repeat_mode == "one" and s.is_playing:
            self._restart_current()
            return

        if not s.queue:
            return

        next_index = s.index_of_current() + 1
        if next_index >= len(s.queue):
            if s.repeat_mode == "all":
                next_index = 0
            else:
                s.is_playing = False
                logger.info("Reached end of queue")
                self._publish_state()
                return

        self._select(s.queue[next_index])

    def previous(self) -> None:
        """Step back one track, wrapping from the first to the last.

        Wrapping ignores the repeat mode. A current track missing from the
        queue counts as index -1, so the last track plays.
        """
        s = self.session
        if s.current_track is None or not s.queue:
            return

        prev_index = s.index_of_current() - 1
        if prev_index < 0:
            prev_index = len(s.queue) - 1

        self._select(s.queue[prev_index])

    def toggle_shuffle(self) -> None:
        """Enter or leave shuffle.

        Entering shuffles the original order and moves the current track to
        the front, so it neither replays nor gets skipped. Leaving restores
        the original order verbatim.
        """
        s = self.session
        s.shuffling = not s.shuffling

        if s.shuffling:
            shuffled = list(s.original_queue)
            self._rng.shuffle(shuffled)
            if s.current_track is not None:
                for i, track in enumerate(shuffled):
                    if track.id == s.current_track.id:
                        shuffled[0], shuffled[i] = shuffled[i], shuffled[0]
                        break
            s.queue = shuffled
        else:
            s.queue = list(s.original_queue)

        logger.debug(f"Shuffle {'on' if s.shuffling else 'off'}")
        self._publish_state()

    def toggle_repeat(self) -> None:
        """Cycle repeat mode off -> all -> one -> off."""
        s = self.session
        s.repeat_mode = NEXT_REPEAT_MODE[s.repeat_mode]
        self._publish_state()

    def set_volume(self, volume: float) -> None:
        """Store a volume clamped to [0, 1]; any level above zero unmutes."""
        s = self.session
        s.volume = _clamp_volume(volume)
        if s.volume > 0:
            s.muted = False
        self._publish_state()

    def toggle_mute(self) -> None:
        """Flip mute without touching the stored volume."""
        s = self.session
        s.muted = not s.muted
        self._publish_state()

    def seek(self, position_sec: float) -> None:
        """Ask the device to jump to ``position_sec`` in the current track."""
        s = self.session
        if s.current_track is None:
            return

        position = max(0.0, float(position_sec))
        if s.duration_sec is not None:
            position = min(position, s.duration_sec)
        s.position_sec = position
        self._emit("playback:seek", {"track_id": s.current_track.id, "position_sec": position})

    # Device reports

    def handle_transport_event(self, event: TransportEvent) -> None:
        """Apply a report from an audio-rendering device.

        Reports about any track other than the current one are stale or
        duplicates from another device and are dropped, so one track end
        advances the queue at most once.
        """
        s = self.session

        if s.current_track is None or event.track_id != s.current_track.id:
            logger.debug(f"Ignoring {event.type} for non-current track {event.track_id}")
            return

        if event.type == "ended":
            if s.repeat_mode == "one":
                s.is_playing = True
                self._restart_current()
            else:
                self.next()

        elif event.type == "time_update":
            s.position_sec = max(0.0, event.position_sec)
            if event.duration_sec is not None:
                s.duration_sec = event.duration_sec

        elif event.type == "loaded_metadata":
            s.duration_sec = event.duration_sec
            s.position_sec = max(0.0, event.position_sec)

        else:
            logger.warning(f"Unknown transport event: {event.type}")

    # Helpers

    def _select(self, track: Track) -> None:
        s = self.session
        s.current_track = track
        s.is_playing = True
        s.position_sec = 0.0
        s.duration_sec = None
        logger.info(f"Now playing: {track.artist} - {track.title}")
        self._publish_state()

    def _restart_current(self) -> None:
        s = self.session
        s.position_sec = 0.0
        self._emit("playback:restart", {"track_id": s.current_track.id})


def _clamp_volume(volume: float) -> float:
    return min(1.0, max(0.0, float(volume)))
