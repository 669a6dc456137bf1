"""
==========================
Helpers - Music Library
==========================

Lists the audio files available to the journal (the "track library") and maps track names to
their served URLs.

Usage:
>>> from memory_journal.helpers.music import get_music_files
>>> get_music_files()
[{'name': 'rain.mp3', 'url': '/music/rain.mp3'}]

*Author: Sudharshan TK*\n
*Created: 2025-09-06*
"""

import os
import re
from urllib.parse import quote

import memory_journal.helpers.config as cfg


def track_sort_key(name: str):
    return (name.casefold(), name)


def track_url(name: str) -> str:
    return f"/music/{quote(name, safe='')}"


def track_display_name(name: str) -> str:
    # strip the extension
    return re.sub(r"\.[^.]+$", "", name)


def get_music_files() -> list[dict]:
    """
    List supported audio files in the music directory, sorted by name.
    Creates the directory when it does not exist yet.

    Returns:
        list[dict]: `{"name": ..., "url": ...}` per track.
    """
    music_dir = cfg.MUSIC_DIR
    os.makedirs(music_dir, exist_ok=True)

    names = [
        entry.name for entry in os.scandir(music_dir)
        if entry.is_file() and os.path.splitext(entry.name)[1].lower() in cfg.SUPPORTED_AUDIO_EXTENSIONS
    ]
    names.sort(key=track_sort_key)
    return [{"name": name, "url": track_url(name)} for name in names]


def library_name_set() -> set:
    return {item["name"] for item in get_music_files()}


def track_path(name: str) -> str:
    """
    Absolute path of a library track, used by the local audio output.
    """
    return os.path.join(cfg.MUSIC_DIR, os.path.basename(name))
