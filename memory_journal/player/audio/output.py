"""
==========================
Audio - Output Interface
==========================

The single audio output shared by every playback context. The controller is its only owner.
`VirtualAudioOutput` is a silent implementation that tracks position with the scheduler clock;
it is used when no audio device is available and by the tests (it can be told to refuse
playback until a user gesture, like a browser's autoplay policy).

*Author: Sudharshan TK*\n
*Created: 2025-09-07*
"""

import abc
from typing import Callable, Optional


class PlaybackRejected(Exception):
    """
    The output refused to start playback (e.g. autoplay blocked, no device).
    """


class TrackLoadError(Exception):
    """
    The track source could not be opened (missing or undecodable file).
    Unlike `PlaybackRejected`, a user gesture will not help.
    """


class AudioOutput(abc.ABC):

    def __init__(self):
        self.track_name: Optional[str] = None
        self._on_ended: Optional[Callable[[], None]] = None

    def set_ended_callback(self, callback: Callable[[], None]) -> None:
        self._on_ended = callback

    def _emit_ended(self) -> None:
        if self._on_ended is not None:
            self._on_ended()

    @abc.abstractmethod
    def load(self, track_name: str, url: str) -> None:
        """
        Replace the source; playback position resets to 0 and the output is paused.
        Raises `TrackLoadError` when the source cannot be opened.
        """

    @abc.abstractmethod
    def play(self) -> None:
        """Start or resume playback. Raises `PlaybackRejected` when refused."""

    @abc.abstractmethod
    def pause(self) -> None:
        ...

    @abc.abstractmethod
    def seek(self, seconds: float) -> None:
        ...

    @property
    @abc.abstractmethod
    def paused(self) -> bool:
        ...

    @property
    @abc.abstractmethod
    def current_time(self) -> float:
        ...

    @property
    @abc.abstractmethod
    def volume(self) -> float:
        ...

    @volume.setter
    @abc.abstractmethod
    def volume(self, value: float) -> None:
        ...

    def poll(self) -> None:
        """Called once per frame; implementations detect track end here."""

    def close(self) -> None:
        ...


class VirtualAudioOutput(AudioOutput):
    """
    Silent output. Position advances with the clock passed to `poll` while playing;
    a track "ends" after `track_length` seconds when a length is set.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None, track_length: Optional[float] = None):
        super().__init__()
        self._clock = clock
        self.track_length = track_length
        self.url: Optional[str] = None
        self.blocked = False
        self.missing: set = set()
        self.loads = 0
        self.play_calls = 0
        self._paused = True
        self._time = 0.0
        self._volume = 1.0
        self._last_poll: Optional[float] = None

    def load(self, track_name, url):
        self.loads += 1
        if track_name in self.missing:
            raise TrackLoadError(f"cannot load {track_name}")
        self.track_name = track_name
        self.url = url
        self._paused = True
        self._time = 0.0

    def play(self):
        self.play_calls += 1
        if self.blocked:
            raise PlaybackRejected("playback blocked until user gesture")
        if self.track_name is None:
            raise PlaybackRejected("no source loaded")
        self._paused = False
        self._last_poll = self._clock() if self._clock else None

    def pause(self):
        self._paused = True

    def seek(self, seconds):
        self._time = max(0.0, float(seconds))

    @property
    def paused(self):
        return self._paused

    @property
    def current_time(self):
        return self._time

    @property
    def volume(self):
        return self._volume

    @volume.setter
    def volume(self, value):
        self._volume = min(max(float(value), 0.0), 1.0)

    def finish(self) -> None:
        """Simulate the end of the current track."""
        self._paused = True
        self._emit_ended()

    def poll(self):
        if self._paused or self._clock is None:
            return
        now = self._clock()
        if self._last_poll is not None:
            self._time += max(0.0, now - self._last_poll) / 1000.0
        self._last_poll = now
        if self.track_length is not None and self._time >= self.track_length:
            self.finish()
