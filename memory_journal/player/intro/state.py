"""
==========================
Intro - State
==========================

Timing thresholds of the intro sequence and the state of one intro run.

Features:
- Thresholds in milliseconds after the first animation frame (title, scene ramp, prompt,
  interactive, title fade) and after completion (overlay fade out and hide).
- `IntroState`: flags for every transition reached, the idle shake timer, `reset` and `phase`.
- `scene_progress`: scene fade-in factor for an elapsed time, clamped to [0, 1].

Usage:
>>> from memory_journal.player.intro.state import IntroState, scene_progress
>>> state = IntroState(start=0.0)
>>> state.phase
'idle'
>>> scene_progress(2250)
0.5

*Author: Sudharshan TK*\n
*Created: 2025-09-09*
"""

from dataclasses import dataclass
from typing import Optional

from memory_journal.player.scheduler import Scheduler, TaskHandle

# Milliseconds after the first animation frame
TITLE_MS = 1000
SCENE_START_MS = 1500
SCENE_RAMP_MS = 1500
SCENE_READY_MS = 3000
PROMPT_MS = 3500
PROMPT_SHAKE_MS = 4000
INTERACTIVE_MS = 4500
TITLE_FADE_MS = 11000

IDLE_SHAKE_INTERVAL_MS = 3000
SHAKE_DURATION_MS = 500

# Offsets after the intro is completed
OVERLAY_FADE_OUT_MS = 5200
OVERLAY_HIDE_MS = 7000


@dataclass
class IntroState:
    start: Optional[float] = None
    title_shown: bool = False
    scene_ready: bool = False
    cursor_enabled: bool = False
    prompt_shown: bool = False
    prompt_shaken: bool = False
    interactive: bool = False
    completed: bool = False
    idle_shake_timer: Optional[TaskHandle] = None

    def cancel_idle_timer(self) -> None:
        Scheduler.cancel(self.idle_shake_timer)
        self.idle_shake_timer = None

    def reset(self) -> None:
        self.cancel_idle_timer()
        self.start = None
        self.title_shown = False
        self.scene_ready = False
        self.cursor_enabled = False
        self.prompt_shown = False
        self.prompt_shaken = False
        self.interactive = False
        self.completed = False

    @property
    def phase(self) -> str:
        """Most advanced state reached in this run."""
        for name in ("completed", "interactive", "prompt_shaken", "prompt_shown", "scene_ready", "title_shown"):
            if getattr(self, name):
                return name
        return "idle"


def scene_progress(elapsed: float) -> float:
    return min(max((elapsed - SCENE_START_MS) / SCENE_RAMP_MS, 0.0), 1.0)
