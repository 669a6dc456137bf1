"""
==========================
Helpers - Playlist Normalization
==========================

This module provides the list operations shared by the journal server and the audio player for
track-name playlists: parsing persisted values, sanitizing against the live music library,
wrapping playlist indices and the small editing operations used by the playlist editors.

Features:
- `safe_parse_playlist`: accept a list or a JSON string, keep trimmed non-empty strings.
- `sanitize_playlist`: basename, trim, dedup, optionally keep only names present in the library.
- `normalize_index`: wrap any index (negative included) into `[0, length)`.
- `add_tracks`, `remove_tracks`, `move_track`: editor operations.

Usage:
>>> from memory_journal.helpers.playlist import sanitize_playlist, normalize_index
>>> sanitize_playlist(["b.mp3", "c.mp3"], {"a.mp3", "b.mp3"})
['b.mp3']
>>> normalize_index(-1, 3)
2

*Author: Sudharshan TK*\n
*Created: 2025-09-06*
"""

import json
import math
import posixpath
from typing import Iterable, Optional


def _clean_strings(items) -> list[str]:
    return [item.strip() for item in items if isinstance(item, str) and item.strip()]


def safe_parse_playlist(raw_value, fallback: Optional[list[str]] = None) -> list[str]:
    """
    Parse a playlist stored either as a list or as a JSON encoded list.
    Anything that is not a list (or not parseable) yields a copy of `fallback`.

    Args:
        raw_value: list, JSON string or None.
        fallback (list[str], optional): value used when `raw_value` is unusable. Defaults to [].

    Returns:
        list[str]: Trimmed, non-empty track names (duplicates kept).
    """
    fallback = list(fallback or [])
    if raw_value is None or raw_value == "":
        return fallback

    if isinstance(raw_value, (list, tuple)):
        return _clean_strings(raw_value)

    if isinstance(raw_value, str):
        try:
            parsed = json.loads(raw_value)
        except ValueError:
            return fallback
        if isinstance(parsed, list):
            return _clean_strings(parsed)

    return fallback


def sanitize_playlist(playlist: Iterable[str], available: Optional[set] = None) -> list[str]:
    """
    Normalize a playlist: reduce every entry to its basename, drop empties and
    duplicates, and (when `available` is given) drop names missing from the library.
    Order is preserved and the operation is idempotent.
    """
    unique = []
    seen = set()
    for item in playlist:
        if not isinstance(item, str):
            continue
        normalized = posixpath.basename(item.replace("\\", "/")).strip()
        if not normalized or normalized in seen:
            continue
        if available is not None and normalized not in available:
            continue
        seen.add(normalized)
        unique.append(normalized)
    return unique


def normalize_track_list(raw) -> list[str]:
    """
    Trim and dedup a list of names without touching their path components.
    Non-list input yields an empty list.
    """
    if not isinstance(raw, (list, tuple)):
        return []
    result = []
    seen = set()
    for name in _clean_strings(raw):
        if name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result


def filter_existing_tracks(raw, library_names: set) -> list[str]:
    return [name for name in normalize_track_list(raw) if name in library_names]


def normalize_index(index, length: int) -> int:
    """
    Wrap `index` into `[0, length)`; negative values wrap from the end.
    Returns 0 for an empty playlist or a non-finite index.
    """
    if not length:
        return 0
    try:
        value = float(index)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value):
        return 0
    return int(value) % length


def add_tracks(playlist: list[str], names: Iterable[str]) -> list[str]:
    """Append every name not already present, in the given order."""
    for name in names:
        if name not in playlist:
            playlist.append(name)
    return playlist


def remove_tracks(playlist: list[str], names: Iterable[str]) -> list[str]:
    """Return a new playlist without the selected names."""
    selected = set(names)
    return [name for name in playlist if name not in selected]


def move_track(playlist: list[str], index: int, direction: int) -> int:
    """
    Swap the item at `index` with its neighbour in `direction` (-1 up, +1 down).
    Returns the item's new index; no-op (returns `index`) at either boundary.
    """
    target = index + direction
    if index < 0 or index >= len(playlist) or target < 0 or target >= len(playlist):
        return index
    playlist[index], playlist[target] = playlist[target], playlist[index]
    return target
