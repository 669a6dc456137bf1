"""
==========================
Intro - Sequencer
==========================

Timer-driven state machine for the intro: title, scene, prompt, then interaction, while the
procedural scene is drawn every frame. Each threshold is checked every frame and fires exactly
once per run; a late frame fires every due transition, in threshold order, on that frame.

States (ms after the first frame):
- 1000  title shown
- 3000  scene ready (custom cursor enabled)
- 3500  prompt shown (chime)
- 4000  prompt shaken (chime)
- 4500  interactive: the prompt shakes again every 3000 ms until the intro is completed
- click completed: prompt hidden, dialog shown, title faded, main content revealed,
        overlay fades out at +5200 ms and is hidden at +7000 ms

The sequencer owns no audio state; it only calls the `chime` callback on prompt transitions.

Usage:
>>> from memory_journal.player.intro.sequencer import IntroSequencer
>>> sequencer = IntroSequencer(scheduler, view, scene, chime=chime.play)
>>> sequencer.start()
>>> scheduler.advance(5000, step_ms=16)
>>> sequencer.handle_click()

*Author: Sudharshan TK*\n
*Created: 2025-09-09*
"""

from typing import Callable, Optional

from memory_journal.logger import logger
from memory_journal.player.intro.cursor import CursorTracker
from memory_journal.player.intro.scene import IntroScene
from memory_journal.player.intro.state import (
    IDLE_SHAKE_INTERVAL_MS, INTERACTIVE_MS, OVERLAY_FADE_OUT_MS, OVERLAY_HIDE_MS, PROMPT_MS,
    PROMPT_SHAKE_MS, SCENE_READY_MS, SHAKE_DURATION_MS, TITLE_MS, IntroState)
from memory_journal.player.intro.view import IntroView
from memory_journal.player.render.base import Renderer
from memory_journal.player.scheduler import Scheduler, TaskHandle


class IntroSequencer:

    def __init__(self, scheduler: Scheduler, view: IntroView, scene: IntroScene,
                 chime: Callable[[], None], renderer: Optional[Renderer] = None,
                 cursor: Optional[CursorTracker] = None):
        self.scheduler = scheduler
        self.view = view
        self.scene = scene
        self.chime = chime
        self.renderer = renderer
        self.cursor = cursor or CursorTracker(scene.rng)
        self.state = IntroState()
        self._teardown: list[TaskHandle] = []
        self._shake_end: Optional[TaskHandle] = None
        self._frame: Optional[TaskHandle] = None
        self.frames = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init_intro(self) -> None:
        """
        Reset the run: every flag, the idle timer, pending teardown tasks, cursor
        decorations and timing, and re-seed the procedural pools.
        """
        self.state.reset()
        for handle in self._teardown:
            handle.cancel()
        self._teardown.clear()
        Scheduler.cancel(self._shake_end)
        self._shake_end = None
        self.cursor.reset()
        self.scene.seed()
        self.view.reset()
        self.view.set_custom_cursor(False)

    def start(self) -> None:
        self.init_intro()
        if self._frame is None:
            self._frame = self.scheduler.request_frame(self.animate)

    def stop(self) -> None:
        Scheduler.cancel(self._frame)
        self._frame = None
        self.state.cancel_idle_timer()

    def resize(self, width: int, height: int) -> None:
        self.scene.resize(width, height)

    @property
    def elapsed(self) -> float:
        if self.state.start is None:
            return 0.0
        return self.scheduler.now() - self.state.start

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def animate(self, now: float) -> None:
        if self.state.start is None:
            self.state.start = now
        elapsed = now - self.state.start

        self.update(elapsed)
        self.cursor.prune(now)
        if self.renderer is not None:
            self.scene.draw(self.renderer, elapsed, now, self.cursor)
        self.frames += 1
        self._frame = self.scheduler.request_frame(self.animate)

    def update(self, elapsed: float) -> None:
        state = self.state
        if state.completed:
            return

        if elapsed >= TITLE_MS and not state.title_shown:
            state.title_shown = True
            self.view.show_title()
            logger.debug("[INTRO] Title shown at %.0f ms", elapsed)

        if elapsed >= SCENE_READY_MS and not state.scene_ready:
            state.scene_ready = True

        if elapsed >= SCENE_READY_MS and not state.cursor_enabled:
            state.cursor_enabled = True
            if self.cursor.inside:
                self.view.set_custom_cursor(True)

        if elapsed >= PROMPT_MS and not state.prompt_shown:
            state.prompt_shown = True
            self.view.show_prompt()
            self.chime()

        if elapsed >= PROMPT_SHAKE_MS and not state.prompt_shaken:
            state.prompt_shaken = True
            self.trigger_prompt_shake()

        if elapsed >= INTERACTIVE_MS and not state.interactive:
            self.enable_interactive()

    def enable_interactive(self) -> None:
        self.state.interactive = True
        self.state.cancel_idle_timer()
        self.state.idle_shake_timer = self.scheduler.call_every(IDLE_SHAKE_INTERVAL_MS, self._idle_shake)

    def _idle_shake(self) -> None:
        if not self.state.completed:
            self.trigger_prompt_shake()

    def trigger_prompt_shake(self) -> None:
        self.view.shake_prompt()
        Scheduler.cancel(self._shake_end)
        self._shake_end = self.scheduler.call_later(SHAKE_DURATION_MS, self.view.end_shake)
        self.chime()

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def handle_click(self) -> bool:
        """
        Complete the intro from the interaction point. Idempotent.
        """
        state = self.state
        if state.completed:
            return False

        state.completed = True
        state.interactive = True
        state.cursor_enabled = True
        state.cancel_idle_timer()

        self.view.hide_prompt()
        self.view.show_dialog()
        self.view.fade_title()
        self.view.reveal_main_content()

        self._teardown = [
            self.scheduler.call_later(OVERLAY_FADE_OUT_MS, self.view.fade_out_overlay),
            self.scheduler.call_later(OVERLAY_HIDE_MS, self.view.hide_overlay),
        ]
        logger.info("Intro completed after %.0f ms", self.elapsed)
        return True

    def pointer_enter(self) -> None:
        self.cursor.enter()
        if self.state.cursor_enabled:
            self.view.set_custom_cursor(True)

    def pointer_leave(self) -> None:
        self.cursor.leave()
        self.view.set_custom_cursor(False)

    def pointer_move(self, x: float, y: float) -> None:
        if not self.cursor.inside:
            self.pointer_enter()
        now = self.scheduler.now()
        self.cursor.move(
            x, y, now,
            trails_enabled=self.state.cursor_enabled and self.elapsed >= SCENE_READY_MS,
            footprints_enabled=self.state.interactive,
        )
