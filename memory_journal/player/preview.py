"""
==========================
Player - Intro Preview
==========================

Renders the intro to PNG frames with the Pillow renderer, driving a private scheduler through the
whole sequence (a synthetic pointer wanders over the scene so trails and footprints show up).

Usage:
>>> from memory_journal.player.preview import render_intro_preview
>>> paths = render_intro_preview(width=480, height=270)

*Author: Sudharshan TK*\n
*Created: 2025-09-10*
"""

import math
import os
import random
from typing import Iterable, Optional

import memory_journal.helpers.config as cfg
from memory_journal.helpers.general import now_ms
from memory_journal.logger import logger
from memory_journal.player.intro.scene import IntroScene
from memory_journal.player.intro.sequencer import IntroSequencer
from memory_journal.player.intro.view import LoggingIntroView
from memory_journal.player.render.pillow_renderer import PillowRenderer
from memory_journal.player.scheduler import Scheduler

DEFAULT_FRAME_TIMES = (500, 1200, 2200, 3200, 4200, 6000, 9000)
FRAME_STEP_MS = 50


def render_intro_preview(output_dir: Optional[str] = None, width: int = 480, height: int = 270,
                         frame_times: Iterable[int] = DEFAULT_FRAME_TIMES, seed: Optional[int] = None) -> list[str]:
    """
    Render the intro at the given elapsed times (ms) and save one PNG per frame.

    Returns:
        list[str]: Paths of the written frames, in time order.
    """
    output_dir = output_dir or os.path.join(cfg.PREVIEW_DIR, str(now_ms()))
    os.makedirs(output_dir, exist_ok=True)

    rng = random.Random(seed)
    scheduler = Scheduler()
    sequencer = IntroSequencer(scheduler, LoggingIntroView(), IntroScene(width, height, rng), chime=lambda: None)
    sequencer.start()
    # first frame sets the intro start at t=0
    scheduler.tick(0)

    paths = []
    for target in sorted(frame_times):
        while scheduler.now() + FRAME_STEP_MS < target:
            t = scheduler.now() + FRAME_STEP_MS
            sequencer.pointer_move(width * (0.5 + 0.3 * math.sin(t / 700)),
                                   height * (0.55 + 0.2 * math.cos(t / 900)))
            scheduler.tick(t)

        renderer = PillowRenderer(width, height)
        sequencer.renderer = renderer
        scheduler.tick(target)
        sequencer.renderer = None

        path = os.path.join(output_dir, f"intro_{int(target):05d}ms.png")
        renderer.save_png(path)
        paths.append(path)

    sequencer.stop()
    logger.info("Rendered %d intro preview frames to %s", len(paths), output_dir)
    return paths
