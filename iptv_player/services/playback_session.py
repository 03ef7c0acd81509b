"""Playback session controller for a single media element."""
import asyncio
import logging
import math
from enum import Enum
from typing import Any, Callable, List, Optional, Protocol, Tuple

from ..errors import SessionError

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class MediaHandle(Protocol):
    """The platform media element a session drives."""

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, seconds: float) -> None: ...

    def set_volume(self, level: float) -> None: ...


class ProgressSource(MediaHandle, Protocol):
    """A media element that can report position and duration in seconds."""

    async def query_progress(self) -> Tuple[float, float]: ...


DetachFn = Callable[[], None]
AttachFn = Callable[[str, Any], DetachFn]


def direct_attach(url: str, media: Any) -> DetachFn:
    """Attach for sources the media element plays natively: nothing to release."""
    return lambda: None


class PlaybackSession:
    """State machine around one media element playing one source URL.

    idle -> loading on mount, loading -> ready when the media can play,
    and any state -> error when the media reports a failure. A session
    in error is never retried; callers build a new one instead.

    Events arriving after close() are ignored.
    """

    def __init__(
        self,
        source_url: str,
        attach: AttachFn = direct_attach,
        request_fullscreen: Optional[Callable[[bool], None]] = None,
        volume: float = 1.0,
    ):
        self.source_url = source_url
        self.load_state = LoadState.IDLE
        self.playing = False
        self.position_seconds = 0.0
        self.duration_seconds = 0.0
        self.volume = self._clamp(volume, 0.0, 1.0)
        self.muted = self.volume == 0
        self.fullscreen = False
        self.error_message: Optional[str] = None

        self._attach = attach
        self._request_fullscreen = request_fullscreen
        self._media: Optional[MediaHandle] = None
        self._detach: Optional[DetachFn] = None
        self._play_requested = False
        self._closed = False
        self._listeners: List[Callable[["PlaybackSession"], None]] = []

    # Lifecycle

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def play_requested(self) -> bool:
        """True while a play() call waits for the media to become ready."""
        return self._play_requested

    def mount(self, media: MediaHandle):
        """Attach the source to a media element and start loading."""
        if self._closed:
            return
        if self._media is not None:
            raise SessionError("Session is already mounted")

        self._media = media
        self._set_state(LoadState.LOADING)
        try:
            self._detach = self._attach(self.source_url, media)
        except Exception as e:
            self._fail(f"Failed to attach stream: {e}")
            return
        media.set_volume(self.effective_volume)

    def close(self):
        """Release the stream attachment; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._play_requested = False
        self.playing = False
        detach, self._detach = self._detach, None
        if detach is not None:
            detach()
        self._listeners.clear()
        logger.debug("Closed session for %s", self.source_url)

    def add_listener(self, callback: Callable[["PlaybackSession"], None]):
        """Register a callback invoked after every state change."""
        self._listeners.append(callback)

    # Media events

    def on_can_play(self, duration: Optional[float] = None):
        # Nothing is loading before mount()
        if self._closed or self.load_state in (LoadState.IDLE, LoadState.ERROR):
            return
        if duration is not None:
            self.duration_seconds = self._normalize_duration(duration)
        if self.load_state == LoadState.LOADING:
            self._set_state(LoadState.READY)
        if self._play_requested:
            self._play_requested = False
            self._start()

    def on_progress(self, position: float, duration: Optional[float] = None):
        if self._closed or self.load_state == LoadState.ERROR:
            return
        if duration is not None:
            self.duration_seconds = self._normalize_duration(duration)
        self.position_seconds = max(0.0, position)
        self._notify()

    def on_media_error(self, message: str):
        if self._closed:
            return
        self._fail(message or "Failed to load stream")

    # Controls

    def play(self) -> bool:
        """Start playback, or queue the request until the media is ready."""
        if self._closed or self.load_state == LoadState.ERROR:
            return False
        if self.load_state != LoadState.READY:
            self._play_requested = True
            return False
        if self.playing:
            return True
        return self._start()

    def pause(self):
        if self._closed:
            return
        self._play_requested = False
        if self.playing and self._media is not None:
            self._media.pause()
        self.playing = False
        self._notify()

    def toggle_play(self) -> bool:
        if self.playing:
            self.pause()
            return False
        return self.play()

    def seek(self, seconds: float):
        """Move to a position clamped into [0, duration]."""
        if self._closed or self.load_state == LoadState.ERROR:
            return
        self.position_seconds = self._clamp(seconds, 0.0, self.duration_seconds)
        if self._media is not None:
            self._media.seek(self.position_seconds)
        self._notify()

    def skip(self, delta_seconds: float):
        self.seek(self.position_seconds + delta_seconds)

    def set_volume(self, level: float):
        """Set volume in [0, 1]; a level of exactly 0 means muted."""
        if self._closed:
            return
        self.volume = self._clamp(level, 0.0, 1.0)
        self.muted = self.volume == 0
        self._apply_volume()

    def toggle_mute(self):
        # volume keeps the pre-mute level, so unmuting restores it
        if self._closed:
            return
        self.muted = not self.muted
        self._apply_volume()

    @property
    def effective_volume(self) -> float:
        return 0.0 if self.muted else self.volume

    def toggle_fullscreen(self):
        """Flip fullscreen and forward the request; a denial is not reconciled."""
        if self._closed:
            return
        self.fullscreen = not self.fullscreen
        if self._request_fullscreen is not None:
            self._request_fullscreen(self.fullscreen)
        self._notify()

    # Internals

    def _start(self) -> bool:
        try:
            self._media.play()
        except Exception as e:
            self._fail(f"Playback failed: {e}")
            return False
        self.playing = True
        self._notify()
        return True

    def _fail(self, message: str):
        logger.warning("Playback error for %s: %s", self.source_url, message)
        self.error_message = message
        self.playing = False
        self._play_requested = False
        self._set_state(LoadState.ERROR)

    def _apply_volume(self):
        if self._media is not None:
            self._media.set_volume(self.effective_volume)
        self._notify()

    def _set_state(self, state: LoadState):
        logger.debug("Session %s: %s -> %s", self.source_url, self.load_state.value, state.value)
        self.load_state = state
        self._notify()

    def _notify(self):
        for callback in list(self._listeners):
            callback(self)

    @staticmethod
    def _clamp(value: float, low: float, high: float) -> float:
        return max(low, min(high, value))

    @staticmethod
    def _normalize_duration(duration: float) -> float:
        # Live streams report NaN or infinity
        if duration is None or not math.isfinite(duration) or duration < 0:
            return 0.0
        return float(duration)


async def track_progress(session: PlaybackSession, media: ProgressSource, interval: float = 1.0):
    """Poll the media element and push what it reports into the session.

    While the session is loading, the first tick that reports a duration
    or a moving position is the media's can-play signal. A queued play
    request is forwarded once so that sources without a duration (live
    streams) start buffering and can report a position. Returns when the
    session is closed or has failed.
    """
    primed = False
    while not session.closed:
        await asyncio.sleep(interval)
        if session.closed or session.load_state == LoadState.ERROR:
            break

        loading = session.load_state == LoadState.LOADING
        try:
            if loading and session.play_requested and not primed:
                primed = True
                media.play()
            position, duration = await media.query_progress()
        except Exception as e:
            logger.debug("Progress query for %s failed: %s", session.source_url, e)
            continue

        if not loading:
            session.on_progress(position, duration)
        elif duration > 0 or position > 0:
            session.on_can_play(duration)
