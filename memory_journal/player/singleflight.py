"""
==========================
Player - Single Flight
==========================

Memoizes one in-flight (or completed) call so that concurrent callers share a single execution.
A failed call is forgotten, so the next caller retries instead of receiving the cached failure.

Usage:
>>> from memory_journal.player.singleflight import SingleFlight
>>> loader = SingleFlight(load_library_and_settings)
>>> loader.run()       # runs the load
>>> loader.run()       # returns the cached result
>>> loader.invalidate()

*Author: Sudharshan TK*\n
*Created: 2025-09-07*
"""

import threading
from concurrent.futures import Future
from typing import Callable, Optional


class SingleFlight:

    def __init__(self, func: Callable):
        self._func = func
        self._lock = threading.Lock()
        self._future: Optional[Future] = None

    @property
    def done(self) -> bool:
        future = self._future
        return future is not None and future.done() and future.exception() is None

    def invalidate(self) -> None:
        with self._lock:
            self._future = None

    def run(self, timeout: Optional[float] = None):
        """
        Run the wrapped function once and share its outcome.

        The first caller executes the function on its own thread; callers arriving
        while it runs wait for the same future. On failure the memo is dropped
        before the error is re-raised to every waiting caller.
        """
        with self._lock:
            future = self._future
            owner = future is None
            if owner:
                future = self._future = Future()

        if not owner:
            return future.result(timeout)

        try:
            result = self._func()
        except BaseException as e:
            with self._lock:
                if self._future is future:
                    self._future = None
            future.set_exception(e)
            raise
        future.set_result(result)
        return result
