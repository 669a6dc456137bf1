"""
==========================
Worker Management Module
==========================

This module provides the background threads of the tray application and the function that shuts
them down gracefully.

Features:
- `run_server_thread`: runs the journal HTTP server (Flask) in a daemon thread.
- Implements a `FrameClockWorker` class that extends `threading.Thread`.
- Ticks the player scheduler at a fixed frame rate (intro animation, fades, timers).
- Polls the audio output once per frame for track ends.
- `graceful_workers_shutdown`: stop event, join workers, release audio, stop logging, stop the icon.


Usage:
>>> server_thread = run_server_thread(stop_event)
>>> frame_clock = FrameClockWorker(stop_event, thread_name="FrameClockThread", scheduler=scheduler)
>>> frame_clock.start()
>>> graceful_workers_shutdown(icon, item, stop_event, workers, closers=[output.close])

*Author: Sudharshan TK*\n
*Created: 2025-08-31*
"""

import os
import sys
import threading
import time
from typing import Callable, Optional

from memory_journal.workers.frame_clock import FrameClockWorker
from memory_journal.workers.server import run_server_thread

from memory_journal.logger import logger, shutdown_logger


def graceful_workers_shutdown(icon, item, stop_event: threading.Event, workers: list[threading.Thread],
                              closers: Optional[list[Callable[[], None]]] = None):
    """
    Graceful shutdown sequence:
      1. signal workers to stop (stop_event)
      2. give workers a short time to finish the current frame
      3. join the worker threads
      4. release resources (audio output, ...)
      5. stop the logger and the tray icon
    """
    logger.info("Beginning graceful shutdown...")

    try:
        # 1) Signal threads to stop
        try:
            stop_event.set()
        except Exception:
            logger.exception("Failed to set stop_event")

        # 2) small pause to let the frame clock finish its tick
        time.sleep(0.1)

        # 3) Join worker threads
        for thr in workers:
            logger.info("Waiting for thread %s to stop...", thr.name)
            try:
                thr.join(timeout=5.0)
                if thr.is_alive():
                    logger.warning(
                        "Thread %s still alive after timeout", thr.name)
            except Exception:
                logger.exception("Error joining thread %s", thr.name)

        # 4) Release resources owned by the player
        for close in closers or []:
            try:
                close()
            except Exception:
                logger.exception("Failed to release %s", getattr(close, "__qualname__", close))

        logger.info("Stopping Logger Queue...")
        shutdown_logger()  # stop the listener thread if it exists

    except Exception:
        logger.exception("Unexpected error during on_exit")

    finally:
        # Always attempt to stop the tray icon (UI exit)
        try:
            if icon is not None:
                icon.stop()
            try:
                sys.exit(0)
            except SystemExit:
                os._exit(0)

        except Exception:
            logger.exception("Failed to stop tray icon")
