"""
==========================
Audio - Controller
==========================

Owns the single audio output and switches it between the two playback contexts: the global
playlist (background music of the journal) and a memory's own playlist (played while the memory
is open). Handles fades, autoplay-unlock retries on the next user gesture, debounced volume
persistence and the resume snapshot that brings the global playlist back where it was.

Features:
- `ensure_loaded` / `load_library_and_settings`: fetch and normalize library + settings once.
- `play_track`, `play_global_track`, `play_memory_track`, `handle_audio_ended`; tracks that fail
  to load are skipped.
- `start_memory_playback`, `restore_global_playback`: memory context lifecycle.
- `fade_to`, `set_volume`: volume handling (frame-driven fade, debounced save).
- `play`, `pause`, `toggle_play_pause`, `next_track`, `previous_track`: transport.
- Global playlist and memory draft editing, `save_global_playlist`.

All methods run on the scheduler thread.

*Author: Sudharshan TK*\n
*Created: 2025-09-08*
"""

from typing import Iterable, Optional

import memory_journal.helpers.config as cfg
from memory_journal.helpers.general import clamp, to_finite_float
from memory_journal.helpers.music import track_url
from memory_journal.helpers.playlist import add_tracks, move_track, normalize_index, remove_tracks
from memory_journal.logger import logger
from memory_journal.player.api import ApiError, JournalApi
from memory_journal.player.audio.output import AudioOutput, PlaybackRejected, TrackLoadError
from memory_journal.player.audio.session import AudioSession, MemoryPlayback, PlaybackMode, ResumeState
from memory_journal.player.events import KEY_DOWN, POINTER_DOWN, GestureListeners
from memory_journal.player.scheduler import Scheduler, TaskHandle
from memory_journal.player.singleflight import SingleFlight

UNLOCK_GESTURES = (POINTER_DOWN, KEY_DOWN)

PLAYING, BLOCKED, UNPLAYABLE = "playing", "blocked", "unplayable"


class AudioController:

    def __init__(self, api: JournalApi, output: AudioOutput, scheduler: Scheduler,
                 gestures: GestureListeners, session: Optional[AudioSession] = None):
        self.api = api
        self.output = output
        self.scheduler = scheduler
        self.gestures = gestures
        self.session = session or AudioSession()

        self._loader = SingleFlight(self.load_library_and_settings)
        self._fade_handle: Optional[TaskHandle] = None
        self._volume_save_handle: Optional[TaskHandle] = None
        self._retry_listener = None

        self.output.set_ended_callback(self.handle_audio_ended)
        self.output.volume = self.session.target_volume

    # ------------------------------------------------------------------
    # Library & settings
    # ------------------------------------------------------------------

    def load_library_and_settings(self) -> AudioSession:
        """
        Fetch the track library and the saved audio settings, then normalize the
        session against the live library. A failed library fetch raises before any
        state is touched; a failed settings fetch falls back to defaults.
        """
        files = self.api.get_music_files()
        try:
            settings = self.api.get_audio_settings()
        except ApiError as e:
            logger.warning("Audio settings unavailable, using defaults: %s", e)
            settings = {"global_playlist": [], "volume": cfg.DEFAULT_VOLUME}

        s = self.session
        s.set_library(files)

        playlist = s.filter_existing(settings.get("global_playlist"))
        s.global_playlist = playlist or [item["name"] for item in s.library]

        volume = to_finite_float(settings.get("volume"), None)
        s.target_volume = cfg.DEFAULT_VOLUME if volume is None else clamp(volume, 0.0, 1.0)

        if s.global_track_index >= len(s.global_playlist):
            s.global_track_index = 0

        s.memory_playlist_draft = s.filter_existing(s.memory_playlist_draft)
        playback = s.current_memory_playback
        if playback is not None:
            playback.playlist = s.filter_existing(playback.playlist)
            if playback.index >= len(playback.playlist):
                playback.index = 0

        if self._fade_handle is None:
            self.output.volume = s.target_volume

        logger.info("Music library loaded: %d tracks, %d in global playlist",
                    len(s.library), len(s.global_playlist))
        return s

    def ensure_loaded(self) -> AudioSession:
        """
        Load library + settings once; concurrent callers share the same load and
        a failed load is forgotten so the next call retries.
        """
        try:
            return self._loader.run()
        except ApiError as e:
            logger.error("Failed to load music library: %s", e)
            raise

    def reload(self) -> AudioSession:
        self._loader.invalidate()
        return self.ensure_loaded()

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def _register_retry(self, callback) -> None:
        if self._retry_listener is not None:
            for kind in UNLOCK_GESTURES:
                self.gestures.remove(kind, self._retry_listener)
        self._retry_listener = self.gestures.once_any(UNLOCK_GESTURES, callback)

    def _apply_track_source(self, name: str, force_reload: bool, start_time: float) -> None:
        same_track = self.output.track_name == name
        if force_reload or not same_track:
            self.output.load(name, self.session.track_url(name) or track_url(name))
        if start_time > 0:
            self.output.seek(start_time)

    def _start_track(self, name: str, restart: bool, start_time: float, fade_in: bool) -> str:
        def retry():
            self._retry_listener = None
            self.play_track(name, restart=restart, start_time=start_time, fade_in=fade_in)

        try:
            self._apply_track_source(name, restart, start_time)
            self.cancel_fade()
            self.output.volume = 0.0 if fade_in else self.session.target_volume
            self.output.play()
        except TrackLoadError as e:
            logger.error("Skipping unplayable track %s: %s", name, e)
            return UNPLAYABLE
        except PlaybackRejected as e:
            logger.warning("Playback blocked, waiting for user interaction: %s", e)
            self._register_retry(retry)
            return BLOCKED

        self.session.paused_for_empty = False
        if fade_in:
            self.fade_to(self.session.target_volume, cfg.FADE_IN_MS)
        return PLAYING

    def play_track(self, name: Optional[str], restart: bool = True, start_time: float = 0,
                   fade_in: bool = False) -> bool:
        """
        Play `name` on the shared output.

        The source is reloaded only when the track differs or `restart` is set; a
        positive `start_time` seeks after loading. When the output refuses to start,
        a one-shot retry is registered for the next pointer-down / key-down. A track
        whose file cannot be loaded is logged and not retried.

        Returns:
            bool: True when playback started.
        """
        if not name:
            return False
        start_time = max(0.0, to_finite_float(start_time, 0.0))
        return self._start_track(name, restart, start_time, fade_in) == PLAYING

    def _play_from_playlist(self, playlist: list[str], index: int, set_index, restart: bool,
                            start_time: float, fade_in: bool) -> bool:
        """
        Play `playlist[index]`, moving forward past tracks that fail to load.
        Each track is tried at most once per call.
        """
        start_time = max(0.0, to_finite_float(start_time, 0.0))
        for _ in range(len(playlist)):
            set_index(index)
            status = self._start_track(playlist[index], restart, start_time, fade_in)
            if status != UNPLAYABLE:
                return status == PLAYING
            index = (index + 1) % len(playlist)
            restart, start_time = True, 0.0
        logger.error("No playable track in playlist of %d", len(playlist))
        return False

    def play_global_track(self, index, restart: bool = True, start_time: float = 0,
                          fade_in: bool = False) -> bool:
        s = self.session
        if not s.global_playlist:
            return False
        s.enter_global_mode()

        def set_index(i):
            s.global_track_index = i

        return self._play_from_playlist(s.global_playlist, normalize_index(index, len(s.global_playlist)),
                                        set_index, restart, start_time, fade_in)

    def play_memory_track(self, index, restart: bool = True, start_time: float = 0) -> bool:
        playback = self.session.current_memory_playback
        if playback is None or not playback.playlist:
            return False
        self.session.mode = PlaybackMode.MEMORY

        def set_index(i):
            playback.index = i

        return self._play_from_playlist(playback.playlist, normalize_index(index, len(playback.playlist)),
                                        set_index, restart, start_time, False)

    def handle_audio_ended(self) -> None:
        s = self.session
        if s.memory_active:
            self.play_memory_track(s.current_memory_playback.index + 1, restart=True)
        elif s.global_playlist:
            self.play_global_track(s.global_track_index + 1, restart=True)

    def start_intro_audio(self) -> bool:
        """
        Start the global playlist with a fade-in once the library is loaded.
        When loading fails, try again on the next user gesture.
        """
        try:
            self.ensure_loaded()
        except ApiError:
            self._register_retry(self.start_intro_audio)
            return False

        s = self.session
        if not s.global_playlist:
            return False
        s.enter_global_mode()
        return self.play_global_track(s.global_track_index, restart=True, fade_in=True)

    # ------------------------------------------------------------------
    # Memory context
    # ------------------------------------------------------------------

    def start_memory_playback(self, memory: dict) -> bool:
        """
        Switch to the memory's playlist from its first track, keeping a snapshot of
        the global playback for `restore_global_playback`. A memory without usable
        tracks leaves the global playback untouched.
        """
        s = self.session
        playlist = s.filter_existing(memory.get("music_playlist"))
        if not playlist:
            s.enter_global_mode()
            return False

        if s.global_resume is None:
            s.global_resume = ResumeState(
                index=s.global_track_index,
                time=to_finite_float(self.output.current_time, 0.0),
                was_playing=not self.output.paused,
            )
        s.current_memory_playback = MemoryPlayback(memory_id=str(memory.get("id")), playlist=playlist)
        s.mode = PlaybackMode.MEMORY
        self.play_memory_track(0, restart=True)
        return True

    def restore_global_playback(self) -> bool:
        """
        Leave the memory context and consume the resume snapshot: resume playing at
        the saved position, or load it and stay paused. No-op when nothing is pending.
        """
        s = self.session
        if s.mode != PlaybackMode.MEMORY and s.global_resume is None:
            return False

        resume, s.global_resume = s.global_resume, None
        s.enter_global_mode()
        if resume is None or not s.global_playlist:
            return False

        s.global_track_index = normalize_index(resume.index, len(s.global_playlist))
        resume_time = max(0.0, to_finite_float(resume.time, 0.0))

        if resume.was_playing:
            self.play_global_track(s.global_track_index, restart=resume_time <= 0, start_time=resume_time)
            return True

        self.cancel_fade()
        try:
            self._apply_track_source(s.current_global_track, True, resume_time)
        except (PlaybackRejected, TrackLoadError) as e:
            logger.warning("Could not restore global track: %s", e)
        self.output.pause()
        self.output.volume = s.target_volume
        return True

    # ------------------------------------------------------------------
    # Volume
    # ------------------------------------------------------------------

    def cancel_fade(self) -> None:
        Scheduler.cancel(self._fade_handle)
        self._fade_handle = None

    def fade_to(self, target: float, duration_ms: float) -> None:
        """
        Linearly move the output volume to `target` over `duration_ms`, one step per
        frame. Starting a new fade cancels the one in flight.
        """
        self.cancel_fade()
        start = self.scheduler.now()
        start_volume = self.output.volume
        end_volume = clamp(to_finite_float(target, 0.0), 0.0, 1.0)

        def step(now):
            t = clamp((now - start) / duration_ms, 0.0, 1.0) if duration_ms > 0 else 1.0
            self.output.volume = start_volume + (end_volume - start_volume) * t
            self._fade_handle = self.scheduler.request_frame(step) if t < 1 else None

        self._fade_handle = self.scheduler.request_frame(step)

    @property
    def fading(self) -> bool:
        return self._fade_handle is not None

    def set_volume(self, value) -> float:
        """
        Apply a volume immediately (cancelling any fade) and persist it after a quiet period.
        """
        s = self.session
        s.target_volume = clamp(to_finite_float(value, s.target_volume), 0.0, 1.0)
        self.cancel_fade()
        self.output.volume = s.target_volume
        self._schedule_volume_save()
        return s.target_volume

    def _schedule_volume_save(self) -> None:
        Scheduler.cancel(self._volume_save_handle)
        self._volume_save_handle = self.scheduler.call_later(cfg.VOLUME_SAVE_DELAY_MS, self._save_volume)

    def _save_volume(self) -> None:
        self._volume_save_handle = None
        try:
            self.api.put_audio_settings({"volume": self.session.target_volume})
        except ApiError as e:
            logger.error("Failed to save volume: %s", e)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def play(self) -> bool:
        s = self.session
        if s.memory_active:
            return self.play_memory_track(s.current_memory_playback.index, restart=False)
        if s.global_playlist:
            return self.play_global_track(s.global_track_index, restart=False)
        return False

    def pause(self) -> None:
        self.session.paused_for_empty = False
        if not self.output.paused:
            self.output.pause()

    def toggle_play_pause(self) -> None:
        if self.output.paused:
            self.play()
        else:
            self.pause()

    def _step_track(self, direction: int) -> bool:
        s = self.session
        if s.memory_active:
            return self.play_memory_track(s.current_memory_playback.index + direction, restart=True)
        if s.global_playlist:
            return self.play_global_track(s.global_track_index + direction, restart=True)
        return False

    def next_track(self) -> bool:
        return self._step_track(1)

    def previous_track(self) -> bool:
        return self._step_track(-1)

    # ------------------------------------------------------------------
    # Playlist editing
    # ------------------------------------------------------------------

    def _library_only(self, names: Iterable[str]) -> list[str]:
        return self.session.filter_existing(list(names))

    def add_to_global_playlist(self, names: Iterable[str]) -> list[str]:
        return add_tracks(self.session.global_playlist, self._library_only(names))

    def remove_from_global_playlist(self, names: Iterable[str]) -> list[str]:
        """
        Remove the selected names; the cursor follows the current track when it survives.
        """
        s = self.session
        current = s.current_global_track
        s.global_playlist = remove_tracks(s.global_playlist, names)
        if current is not None and current in s.global_playlist:
            s.global_track_index = s.global_playlist.index(current)
        else:
            s.global_track_index = 0
        return s.global_playlist

    def move_global_track(self, index: int, direction: int) -> int:
        return move_track(self.session.global_playlist, index, direction)

    def set_memory_draft(self, raw) -> list[str]:
        self.session.memory_playlist_draft = self.session.filter_existing(raw)
        return self.session.memory_playlist_draft

    def add_to_memory_draft(self, names: Iterable[str]) -> list[str]:
        return add_tracks(self.session.memory_playlist_draft, self._library_only(names))

    def remove_from_memory_draft(self, names: Iterable[str]) -> list[str]:
        s = self.session
        s.memory_playlist_draft = remove_tracks(s.memory_playlist_draft, names)
        return s.memory_playlist_draft

    def move_memory_draft_track(self, index: int, direction: int) -> int:
        return move_track(self.session.memory_playlist_draft, index, direction)

    def save_global_playlist(self) -> list[str]:
        """
        Re-validate the global playlist against the library and persist it.

        In global mode an emptied list pauses playback (remembered as "paused
        because empty"); re-adding tracks afterwards resumes with a fade-in. A
        playing selection is never interrupted.
        """
        self.ensure_loaded()
        s = self.session
        playlist = s.filter_existing(s.global_playlist)
        try:
            self.api.put_audio_settings({"global_playlist": playlist})
        except ApiError as e:
            logger.error("Failed to save global playlist: %s", e)
            raise

        s.global_playlist = playlist
        if s.global_track_index >= len(playlist):
            s.global_track_index = 0

        if not playlist:
            if s.mode == PlaybackMode.GLOBAL and not self.output.paused:
                self.output.pause()
                s.paused_for_empty = True
            return playlist

        if s.mode == PlaybackMode.GLOBAL and s.paused_for_empty and self.output.paused:
            self.play_global_track(s.global_track_index, restart=False, fade_in=True)
        return playlist

    # ------------------------------------------------------------------

    def status(self) -> dict:
        s = self.session
        playback = s.current_memory_playback
        return {
            "mode": s.mode.value,
            "track": playback.current_track if s.memory_active else s.current_global_track,
            "paused": self.output.paused,
            "volume": s.target_volume,
            "global_playlist": list(s.global_playlist),
        }
