"""
==========================
Frame Clock Worker Module
==========================

This module provides the background thread that plays the role of the browser's animation frame
loop for the player: it ticks the cooperative scheduler (timers, frame callbacks, fades) at the
configured frame rate.
(Configure `player.fps` in `.config.yml` to change the frame rate.)

Features:
- Implements a `FrameClockWorker` class that extends `threading.Thread`.
- Polls the audio output once per frame before ticking the scheduler.
- Stops when the shared stop event is set.

Usage:
>>> frame_clock = FrameClockWorker(stop_event, thread_name="FrameClockThread", scheduler=scheduler)
>>> frame_clock.start()

*Author: Sudharshan TK*\n
*Created: 2025-09-10*
"""
from memory_journal.workers.frame_clock.worker import *
