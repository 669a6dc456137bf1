"""
==========================
Intro - View Hooks
==========================

Presentation hooks the intro sequencer calls on each transition. `IntroView` does nothing;
`LoggingIntroView` records every call (and logs it), which is what the tray app and the tests use.

*Author: Sudharshan TK*\n
*Created: 2025-09-09*
"""

from memory_journal.logger import logger


class IntroView:

    def reset(self): ...

    def show_title(self): ...

    def show_prompt(self): ...

    def shake_prompt(self): ...

    def end_shake(self): ...

    def set_custom_cursor(self, enabled: bool): ...

    def hide_prompt(self): ...

    def show_dialog(self): ...

    def fade_title(self): ...

    def reveal_main_content(self): ...

    def fade_out_overlay(self): ...

    def hide_overlay(self): ...


class LoggingIntroView(IntroView):

    def __init__(self):
        self.events: list[str] = []
        self.custom_cursor = False
        self.overlay_visible = True

    def _event(self, name: str) -> None:
        self.events.append(name)
        logger.debug("[INTRO] %s", name)

    def count(self, name: str) -> int:
        return self.events.count(name)

    def reset(self):
        self.custom_cursor = False
        self.overlay_visible = True
        self._event("reset")

    def show_title(self):
        self._event("show_title")

    def show_prompt(self):
        self._event("show_prompt")

    def shake_prompt(self):
        self._event("shake_prompt")

    def end_shake(self):
        self._event("end_shake")

    def set_custom_cursor(self, enabled):
        self.custom_cursor = enabled
        self._event("custom_cursor_on" if enabled else "custom_cursor_off")

    def hide_prompt(self):
        self._event("hide_prompt")

    def show_dialog(self):
        self._event("show_dialog")

    def fade_title(self):
        self._event("fade_title")

    def reveal_main_content(self):
        self._event("reveal_main_content")

    def fade_out_overlay(self):
        self._event("fade_out_overlay")

    def hide_overlay(self):
        self.overlay_visible = False
        self._event("hide_overlay")
