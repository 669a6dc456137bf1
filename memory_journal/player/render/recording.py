"""
Renderer that draws nothing and records every call; used for headless runs and tests.
"""

import contextlib

from memory_journal.player.render.base import Renderer


class RecordingRenderer(Renderer):

    def __init__(self, width: int = 1280, height: int = 720):
        super().__init__(width, height)
        self.calls: list[tuple] = []
        self.layers: list[str] = []

    def reset(self) -> None:
        self.calls.clear()
        self.layers.clear()

    @contextlib.contextmanager
    def layer(self, name):
        self.layers.append(name)
        with super().layer(name):
            yield self

    def _record(self, name, *args):
        self.calls.append((name, self.state.alpha) + args)

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def clear(self, color):
        self._record("clear", color)

    def fill_rect(self, x, y, w, h, fill):
        self._record("fill_rect", x, y, w, h)

    def fill_circle(self, x, y, radius, fill):
        self._record("fill_circle", x, y, radius)

    def fill_polygon(self, points, fill):
        self._record("fill_polygon", len(points))

    def stroke_circle(self, x, y, radius, color, width):
        self._record("stroke_circle", x, y, radius)

    def stroke_polyline(self, points, color, width):
        self._record("stroke_polyline", len(points))
