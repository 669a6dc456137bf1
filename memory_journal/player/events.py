"""
==========================
Player - Gesture Listeners
==========================

Registry of listeners for user gestures (pointer down, key down). The audio controller uses
one-shot listeners to retry playback that the audio output refused until the user interacted
("autoplay unlock"). The tray app dispatches a pointer-down for every menu action.

Usage:
>>> from memory_journal.player.events import GestureListeners, POINTER_DOWN, KEY_DOWN
>>> gestures = GestureListeners()
>>> gestures.once_any((POINTER_DOWN, KEY_DOWN), lambda: print("unlocked"))
>>> gestures.dispatch(KEY_DOWN)
unlocked
>>> gestures.dispatch(POINTER_DOWN)  # already consumed

*Author: Sudharshan TK*\n
*Created: 2025-09-07*
"""

from collections import defaultdict
from typing import Callable, Iterable

from memory_journal.logger import logger

POINTER_DOWN = "pointerdown"
KEY_DOWN = "keydown"


class GestureListeners:

    def __init__(self):
        self._listeners: dict[str, list[Callable]] = defaultdict(list)

    def add(self, kind: str, callback: Callable) -> None:
        self._listeners[kind].append(callback)

    def remove(self, kind: str, callback: Callable) -> None:
        listeners = self._listeners.get(kind)
        if listeners and callback in listeners:
            listeners.remove(callback)

    def once_any(self, kinds: Iterable[str], callback: Callable[[], None]) -> Callable:
        """
        Register `callback` on every kind in `kinds`; the first matching gesture
        removes it from all of them before calling it, so it runs at most once.
        """
        kinds = tuple(kinds)

        def listener():
            for kind in kinds:
                self.remove(kind, listener)
            callback()

        for kind in kinds:
            self.add(kind, listener)
        return listener

    def count(self, kind: str) -> int:
        return len(self._listeners.get(kind, ()))

    def dispatch(self, kind: str) -> None:
        for callback in list(self._listeners.get(kind, ())):
            try:
                callback()
            except Exception:
                logger.exception("Gesture listener failed for %s", kind)
