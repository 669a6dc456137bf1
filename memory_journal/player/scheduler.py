"""
==========================
Player - Scheduler
==========================

A single-threaded cooperative scheduler that stands in for the browser's timer and
animation-frame queues. Everything the player does (animation frames, idle nudges, overlay
teardown, fade steps, debounced saves) runs inside `tick()`, on the thread that drives it:
the `FrameClockWorker` in the tray app, or the test itself through `advance()`.

Features:
- `call_later(delay_ms, callback)`: one-shot task, returns a cancellable `TaskHandle`.
- `call_every(interval_ms, callback)`: repeating task.
- `request_frame(callback)`: run once on the next frame with the frame timestamp.
- `call_soon(callback)`: thread-safe hand-off from other threads (tray menu, server).
- `tick(now_ms)` / `advance(ms)`: run everything that is due.

Usage:
>>> from memory_journal.player.scheduler import Scheduler
>>> scheduler = Scheduler()
>>> handle = scheduler.call_later(500, lambda: print("due"))
>>> scheduler.advance(500)
due

*Author: Sudharshan TK*\n
*Created: 2025-09-07*
"""

import heapq
import itertools
import threading
from typing import Callable, Optional

from memory_journal.logger import logger


class TaskHandle:
    """
    Handle for a scheduled task. `cancel()` is idempotent.
    """

    __slots__ = ("callback", "due", "interval", "cancelled", "_seq")

    def __init__(self, callback: Callable, due: float, interval: Optional[float], seq: int):
        self.callback = callback
        self.due = due
        self.interval = interval
        self.cancelled = False
        self._seq = seq

    def cancel(self):
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled

    def __lt__(self, other: "TaskHandle"):
        return (self.due, self._seq) < (other.due, other._seq)


class Scheduler:
    """
    Cooperative timer / frame queue with a virtual clock.
    The clock only moves when `tick()` (or `advance()`) is called.
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = float(start_ms)
        self._timers: list[TaskHandle] = []
        self._frames: list[TaskHandle] = []
        self._inbox: list[Callable] = []
        self._inbox_lock = threading.Lock()
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable) -> TaskHandle:
        handle = TaskHandle(callback, self._now + max(0.0, delay_ms), None, next(self._seq))
        heapq.heappush(self._timers, handle)
        return handle

    def call_every(self, interval_ms: float, callback: Callable) -> TaskHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        handle = TaskHandle(callback, self._now + interval_ms, interval_ms, next(self._seq))
        heapq.heappush(self._timers, handle)
        return handle

    def request_frame(self, callback: Callable[[float], None]) -> TaskHandle:
        handle = TaskHandle(callback, self._now, None, next(self._seq))
        self._frames.append(handle)
        return handle

    def call_soon(self, callback: Callable) -> None:
        """
        Queue `callback` for the next tick. Safe to call from any thread.
        """
        with self._inbox_lock:
            self._inbox.append(callback)

    @staticmethod
    def cancel(handle: Optional[TaskHandle]) -> None:
        if handle is not None:
            handle.cancel()

    def pending_timers(self) -> int:
        return sum(1 for h in self._timers if not h.cancelled)

    def _run(self, callback: Callable, *args) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception("Scheduled task failed")

    def tick(self, now_ms: float) -> None:
        """
        Move the clock to `now_ms` and run, in order: queued hand-offs, every
        timer that is due (in due order; a repeating timer that fell behind fires
        once and skips the periods it missed), then one round
        of frame callbacks with `now_ms` as their timestamp.
        """
        self._now = max(self._now, float(now_ms))

        with self._inbox_lock:
            inbox, self._inbox = self._inbox, []
        for callback in inbox:
            self._run(callback)

        while self._timers and self._timers[0].due <= self._now:
            handle = heapq.heappop(self._timers)
            if handle.cancelled:
                continue
            if handle.interval is not None:
                handle.due += handle.interval
                if handle.due <= self._now:
                    # missed periods after a stall collapse into the firing just made
                    handle.due = self._now + handle.interval
                handle._seq = next(self._seq)
                heapq.heappush(self._timers, handle)
            self._run(handle.callback)

        # Frames requested while running this round wait for the next tick
        frames, self._frames = self._frames, []
        for handle in frames:
            if not handle.cancelled:
                self._run(handle.callback, self._now)

    def advance(self, delta_ms: float, step_ms: Optional[float] = None) -> None:
        """
        Advance the clock by `delta_ms`, ticking every `step_ms` (one tick at
        the end when omitted).
        """
        target = self._now + delta_ms
        if step_ms:
            while self._now + step_ms < target:
                self.tick(self._now + step_ms)
        self.tick(target)
