import threading
import time
from typing import Callable, Optional

import memory_journal.helpers.config as cfg
from memory_journal.helpers.general import monotonic_ms
from memory_journal.logger import logger
from memory_journal.player.scheduler import Scheduler


class FrameClockWorker(threading.Thread):
    """
    Drives the player scheduler at a fixed frame rate. Every frame it polls the
    audio output (track end detection) and ticks the scheduler with the
    monotonic clock, so all player state is touched from this thread only.
    """

    def __init__(self, stop_event: threading.Event, thread_name: str, scheduler: Scheduler,
                 fps: Optional[int] = None, on_frame: Optional[Callable[[], None]] = None):
        super().__init__(name=thread_name, daemon=True)
        self.thread_name = thread_name
        self.stop_event = stop_event
        self.scheduler = scheduler
        self.fps = fps or cfg.PLAYER_FPS
        self.on_frame = on_frame
        self.frames = 0

    def run(self):
        logger.info("Frame clock started at %s fps", self.fps)
        frame_interval = 1.0 / self.fps
        while not self.stop_event.is_set():
            started = time.monotonic()
            try:
                if self.on_frame is not None:
                    self.on_frame()
                self.scheduler.tick(monotonic_ms())
                self.frames += 1
            except Exception:
                logger.exception("Frame clock tick failed")
            self.stop_event.wait(max(0.0, frame_interval - (time.monotonic() - started)))
        logger.info("Frame clock stopped after %d frames", self.frames)

    def stop(self):
        self.stop_event.set()
