"""
==========================
Audio - Session State
==========================

Mutable state owned by the audio controller: the track library, the global playlist and its
cursor, the memory playlist being edited, the active memory playback context and the snapshot
used to resume the global playlist once memory playback ends.

Invariants:
- `current_memory_playback` is set only while `mode` is `PlaybackMode.MEMORY`.
- Every playlist holds names present in `library` (re-filtered on every library load).
- `global_resume` is taken when memory playback starts and consumed once when it ends.

*Author: Sudharshan TK*\n
*Created: 2025-09-07*
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import memory_journal.helpers.config as cfg
from memory_journal.helpers.music import track_sort_key
from memory_journal.helpers.playlist import filter_existing_tracks


class PlaybackMode(str, Enum):
    GLOBAL = "global"
    MEMORY = "memory"


@dataclass
class MemoryPlayback:
    memory_id: str
    playlist: list[str]
    index: int = 0

    @property
    def current_track(self) -> Optional[str]:
        if 0 <= self.index < len(self.playlist):
            return self.playlist[self.index]
        return None


@dataclass
class ResumeState:
    index: int
    time: float
    was_playing: bool


@dataclass
class AudioSession:
    library: list[dict] = field(default_factory=list)
    global_playlist: list[str] = field(default_factory=list)
    global_track_index: int = 0
    memory_playlist_draft: list[str] = field(default_factory=list)
    current_memory_playback: Optional[MemoryPlayback] = None
    mode: PlaybackMode = PlaybackMode.GLOBAL
    global_resume: Optional[ResumeState] = None
    target_volume: float = field(default_factory=lambda: cfg.DEFAULT_VOLUME)
    # set when the global list was emptied while playing in global mode
    paused_for_empty: bool = False

    def set_library(self, files) -> None:
        """
        Replace the library with the valid `{name, url}` entries of `files`,
        deduplicated by name and sorted by case-folded name.
        """
        library = {}
        for item in files or []:
            if not isinstance(item, dict):
                continue
            name, url = item.get("name"), item.get("url")
            if isinstance(name, str) and isinstance(url, str) and name not in library:
                library[name] = {"name": name, "url": url}
        self.library = sorted(library.values(), key=lambda item: track_sort_key(item["name"]))

    def library_names(self) -> set:
        return {item["name"] for item in self.library}

    def filter_existing(self, raw) -> list[str]:
        return filter_existing_tracks(raw, self.library_names())

    def track_url(self, name: str) -> Optional[str]:
        for item in self.library:
            if item["name"] == name:
                return item["url"]
        return None

    @property
    def current_global_track(self) -> Optional[str]:
        if 0 <= self.global_track_index < len(self.global_playlist):
            return self.global_playlist[self.global_track_index]
        return None

    @property
    def memory_active(self) -> bool:
        playback = self.current_memory_playback
        return self.mode == PlaybackMode.MEMORY and playback is not None and bool(playback.playlist)

    def enter_global_mode(self) -> None:
        self.current_memory_playback = None
        self.mode = PlaybackMode.GLOBAL
