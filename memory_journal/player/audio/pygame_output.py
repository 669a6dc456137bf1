"""
==========================
Audio - pygame Output
==========================

Audio output backed by `pygame.mixer.music` (streamed tracks from the local music directory)
plus the prompt chime played through a separate `pygame.mixer.Sound`.

Features:
- `PygameAudioOutput`: the controller's output; track end is detected in `poll()` (once per frame),
  unreadable files raise `TrackLoadError`.
- `PygameChime`: plays the synthesized prompt chime; failures are logged, never raised.
- `create_audio_output`: pygame output when a device is available, silent virtual output otherwise.

Usage:
>>> from memory_journal.player.audio.pygame_output import create_audio_output
>>> output = create_audio_output(scheduler.now)

*Author: Sudharshan TK*\n
*Created: 2025-09-08*
"""

from typing import Callable, Optional

import pygame

from memory_journal.helpers.music import track_path
from memory_journal.logger import logger
from memory_journal.player.audio.chime import SAMPLE_RATE, synthesize_chime, to_pcm16
from memory_journal.player.audio.output import AudioOutput, PlaybackRejected, TrackLoadError, VirtualAudioOutput


def init_mixer() -> None:
    if not pygame.mixer.get_init():
        pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2)


class PygameAudioOutput(AudioOutput):
    """
    `music.get_pos()` counts milliseconds played since the last `music.play()`
    and does not advance while paused, so the position is the offset handed to
    that `play()` plus `get_pos()`.
    """

    def __init__(self):
        super().__init__()
        init_mixer()
        self._offset = 0.0
        self._paused_at: Optional[float] = None
        self._started = False
        self._paused = True

    def load(self, track_name, url):
        path = track_path(track_name)
        try:
            pygame.mixer.music.load(path)
        except pygame.error as e:
            raise TrackLoadError(f"cannot load {track_name}: {e}") from e
        self.track_name = track_name
        self._offset = 0.0
        self._paused_at = None
        self._started = False
        self._paused = True

    def _start_from(self, seconds: float) -> None:
        pygame.mixer.music.play(start=seconds)
        self._offset = seconds
        self._started = True

    def play(self):
        if self.track_name is None:
            raise PlaybackRejected("no source loaded")
        try:
            if self._started:
                pygame.mixer.music.unpause()
            else:
                self._start_from(self._offset)
        except pygame.error as e:
            raise PlaybackRejected(str(e)) from e
        self._paused_at = None
        self._paused = False

    def pause(self):
        if self._started and not self._paused:
            self._paused_at = self.current_time
            pygame.mixer.music.pause()
        self._paused = True

    def seek(self, seconds):
        seconds = max(0.0, float(seconds))
        if not self._started:
            self._offset = seconds
            return
        try:
            self._start_from(seconds)
            if self._paused:
                pygame.mixer.music.pause()
                self._paused_at = seconds
        except pygame.error as e:
            logger.warning("Seek failed for %s: %s", self.track_name, e)

    @property
    def paused(self):
        return self._paused

    @property
    def current_time(self):
        if not self._started:
            return self._offset
        if self._paused and self._paused_at is not None:
            return self._paused_at
        position = pygame.mixer.music.get_pos()
        return self._offset + (position / 1000.0 if position > 0 else 0.0)

    @property
    def volume(self):
        return pygame.mixer.music.get_volume()

    @volume.setter
    def volume(self, value):
        pygame.mixer.music.set_volume(min(max(float(value), 0.0), 1.0))

    def poll(self):
        if self._started and not self._paused and not pygame.mixer.music.get_busy():
            self._started = False
            self._paused = True
            self._paused_at = None
            self._offset = 0.0
            self._emit_ended()

    def close(self):
        pygame.mixer.music.stop()
        pygame.mixer.quit()


class PygameChime:

    def __init__(self):
        self._sound: Optional[pygame.mixer.Sound] = None

    def play(self) -> None:
        try:
            init_mixer()
            if self._sound is None:
                _, _, channels = pygame.mixer.get_init()
                self._sound = pygame.mixer.Sound(buffer=to_pcm16(synthesize_chime(), channels).tobytes())
            self._sound.play()
        except pygame.error as e:
            logger.info("Chime playback failed: %s", e)


def create_audio_output(clock: Callable[[], float]) -> AudioOutput:
    """
    Build the pygame output, falling back to a silent virtual output when the
    mixer cannot be initialized (no audio device, headless host).
    """
    try:
        return PygameAudioOutput()
    except pygame.error as e:
        logger.warning("Audio device unavailable, using silent output: %s", e)
        return VirtualAudioOutput(clock=clock)
