"""
==========================
Player - Journal
==========================

Glue between the journal API and the audio controller: listing memories, editing them with the
memory playlist draft, and viewing a memory (which plays its own soundtrack and restores the
global playlist when the view is closed).

Memory-detail fetches are sequenced with a view token: a response that arrives after a newer
view or a close is discarded, so a slow fetch never starts music for a memory that is no longer
on screen.

Usage:
>>> from memory_journal.player.journal import JournalPlayer
>>> journal = JournalPlayer(api, controller, scheduler)
>>> view = journal.view_memory("2b1c...")
>>> print(view["audio_block"])
>>> journal.close_view()

*Author: Sudharshan TK*\n
*Created: 2025-09-10*
"""

import itertools
from concurrent.futures import Executor, Future
from typing import Optional

import memory_journal.helpers.config as cfg
from memory_journal.helpers.general import utc_iso_now
from memory_journal.helpers.music import track_display_name
from memory_journal.logger import logger
from memory_journal.player.api import ApiError, JournalApi
from memory_journal.player.audio.controller import AudioController
from memory_journal.player.scheduler import Scheduler

AUDIO_BLOCK_TITLE = "Memory soundtrack"
AUDIO_BLOCK_PLAYING_TITLE = "Memory soundtrack (plays while reading)"
NO_MUSIC_TEXT = "This memory has no dedicated music."


def memory_audio_block(playlist: list[str], current_index: Optional[int] = None) -> str:
    """
    Text block shown under a memory: a notice when it has no usable music,
    otherwise the numbered playlist with `>` marking the current track.
    """
    if not playlist:
        return f"{AUDIO_BLOCK_TITLE}\n{NO_MUSIC_TEXT}"
    lines = []
    for index, name in enumerate(playlist):
        marker = "> " if index == current_index else "  "
        lines.append(f"{marker}{index + 1}. {track_display_name(name)}")
    return AUDIO_BLOCK_PLAYING_TITLE + "\n" + "\n".join(lines)


class JournalPlayer:

    def __init__(self, api: JournalApi, controller: AudioController, scheduler: Scheduler):
        self.api = api
        self.controller = controller
        self.scheduler = scheduler
        self.viewing: Optional[dict] = None
        self.editing_id: Optional[str] = None
        self._tokens = itertools.count(1)
        self._view_token = 0

    # ------------------------------------------------------------------
    # Listing & editing
    # ------------------------------------------------------------------

    def list_memories(self) -> list[dict]:
        return self.api.list_memories()

    def open_editor(self, memory_id: Optional[str] = None) -> Optional[dict]:
        """
        Prepare the editor: a blank draft for a new memory, or the stored memory
        with its playlist (filtered against the library) as the draft.
        """
        self.controller.ensure_loaded()
        self.editing_id = memory_id
        if memory_id is None:
            self.controller.set_memory_draft([])
            return None
        memory = self.api.get_memory(memory_id)
        self.controller.set_memory_draft(memory.get("music_playlist"))
        return memory

    def save_memory(self, title: str, content: str, emotion: Optional[str] = None,
                    memory_date: Optional[str] = None, image_path: Optional[str] = None) -> dict:
        fields = {
            "title": title,
            "content": content,
            "emotion": emotion or cfg.DEFAULT_EMOTION,
            "memory_date": memory_date or utc_iso_now(),
            "music_playlist": list(self.controller.session.memory_playlist_draft),
        }
        try:
            if self.editing_id:
                memory = self.api.update_memory(self.editing_id, fields, image_path)
            else:
                memory = self.api.create_memory(fields, image_path)
        except ApiError as e:
            logger.error("Failed to save memory: %s", e)
            raise
        self.editing_id = None
        return memory

    def delete_memory(self, memory_id: str) -> None:
        try:
            self.api.delete_memory(memory_id)
        except ApiError as e:
            logger.error("Failed to delete memory %s: %s", memory_id, e)
            raise
        if self.viewing and self.viewing["memory"].get("id") == memory_id:
            self.close_view()

    # ------------------------------------------------------------------
    # Viewing
    # ------------------------------------------------------------------

    def begin_view(self) -> int:
        self._view_token = next(self._tokens)
        return self._view_token

    def fetch_for_view(self, memory_id: str) -> dict:
        self.controller.ensure_loaded()
        return self.api.get_memory(memory_id)

    def apply_view(self, token: int, memory: dict) -> Optional[dict]:
        """
        Show a fetched memory and start its soundtrack, unless a newer view or a
        close happened since `token` was issued.
        """
        if token != self._view_token:
            logger.debug("Discarding stale memory view %s", memory.get("id"))
            return None

        self.controller.start_memory_playback(memory)
        self.viewing = {"memory": memory}
        self.refresh_audio_block()
        return self.viewing

    def view_memory(self, memory_id: str) -> Optional[dict]:
        token = self.begin_view()
        try:
            memory = self.fetch_for_view(memory_id)
        except ApiError as e:
            logger.error("Failed to load memory %s: %s", memory_id, e)
            raise
        return self.apply_view(token, memory)

    def request_view(self, memory_id: str, executor: Executor) -> Future:
        """
        Fetch on `executor` and apply the result on the scheduler thread.
        """
        token = self.begin_view()
        future = executor.submit(self.fetch_for_view, memory_id)

        def done(f: Future):
            error = f.exception()
            if error is not None:
                logger.error("Failed to load memory %s: %s", memory_id, error)
                return
            self.scheduler.call_soon(lambda: self.apply_view(token, f.result()))

        future.add_done_callback(done)
        return future

    def refresh_audio_block(self) -> Optional[str]:
        if self.viewing is None:
            return None
        session = self.controller.session
        playback = session.current_memory_playback
        if playback is not None and playback.memory_id == str(self.viewing["memory"].get("id")):
            block = memory_audio_block(playback.playlist, playback.index)
        else:
            block = memory_audio_block(session.filter_existing(self.viewing["memory"].get("music_playlist")))
        self.viewing["audio_block"] = block
        return block

    def close_view(self) -> None:
        self.begin_view()
        self.viewing = None
        self.controller.restore_global_playback()
