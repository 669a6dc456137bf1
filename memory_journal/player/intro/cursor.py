"""
==========================
Intro - Cursor Decorations
==========================

Tracks the pointer over the intro scene and spawns its decorations:
- trails: spawned at most every 30 ms once the custom cursor is enabled, live 500 ms.
- footprints: spawned at most every 120 ms once the intro is interactive, live 3000 ms, size 16-26.

*Author: Sudharshan TK*\n
*Created: 2025-09-09*
"""

import random
from dataclasses import dataclass
from typing import Optional

TRAIL_INTERVAL_MS = 30
TRAIL_LIFE_MS = 500
FOOTPRINT_INTERVAL_MS = 120
FOOTPRINT_LIFE_MS = 3000


@dataclass
class Trail:
    x: float
    y: float
    created: float


@dataclass
class Footprint:
    x: float
    y: float
    created: float
    size: float


class CursorTracker:

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.x = 0.0
        self.y = 0.0
        self.inside = False
        self.trails: list[Trail] = []
        self.footprints: list[Footprint] = []
        self.last_trail_time = 0.0
        self.last_footprint_time = 0.0

    def reset(self) -> None:
        self.trails.clear()
        self.footprints.clear()
        self.last_trail_time = 0.0
        self.last_footprint_time = 0.0

    def enter(self) -> None:
        self.inside = True

    def leave(self) -> None:
        self.inside = False

    def move(self, x: float, y: float, now: float, trails_enabled: bool, footprints_enabled: bool) -> None:
        self.x, self.y = x, y
        self.inside = True
        if trails_enabled and now - self.last_trail_time > TRAIL_INTERVAL_MS:
            self.trails.append(Trail(x, y, now))
            self.last_trail_time = now
        if footprints_enabled and now - self.last_footprint_time > FOOTPRINT_INTERVAL_MS:
            self.footprints.append(Footprint(x, y, now, 16 + self.rng.random() * 10))
            self.last_footprint_time = now

    def prune(self, now: float) -> None:
        self.trails = [t for t in self.trails if now - t.created < TRAIL_LIFE_MS]
        self.footprints = [f for f in self.footprints if now - f.created < FOOTPRINT_LIFE_MS]
