"""
==========================
Intro - Procedural Scene
==========================

The atmospheric animation drawn behind the intro: a background wash, drifting cloud bands, a
rotating sigil, fog blobs revealed through a growing circular clip, ambient particles, the small
intro particle swarm around the title, then the cursor trails and footprints.

Features:
- `IntroScene.seed()`: (re)build every procedural pool from the scene's random generator.
- `IntroScene.resize(width, height)`: change the canvas size and re-seed.
- `IntroScene.draw(renderer, elapsed, now, cursor)`: draw one frame in z-order and advance the
  drifting pools (fog and ambient particles wrap around the canvas edges).

Pools:
- intro particles: 3-5
- ambient particles: min(floor(width * 0.06), 80)
- fog blobs: 12
- cloud bands: 6

Usage:
>>> import random
>>> from memory_journal.player.intro.scene import IntroScene
>>> from memory_journal.player.render.recording import RecordingRenderer
>>> scene = IntroScene(1280, 720, random.Random(7))
>>> scene.draw(RecordingRenderer(1280, 720), elapsed=4000, now=4000)

*Author: Sudharshan TK*\n
*Created: 2025-09-09*
"""

import math
import random
from dataclasses import dataclass
from typing import Optional

from memory_journal.helpers.general import clamp, ease_in_out
from memory_journal.player.intro.cursor import FOOTPRINT_LIFE_MS, TRAIL_LIFE_MS, CursorTracker
from memory_journal.player.intro.state import TITLE_FADE_MS, TITLE_MS, scene_progress
from memory_journal.player.render.base import SCREEN, TRANSPARENT, Renderer, quadratic_points

FOG_BLOB_COUNT = 12
CLOUD_BAND_COUNT = 6
MAX_AMBIENT_PARTICLES = 80

LAVENDER = (200, 180, 255)


def rgba(rgb: tuple, alpha: float) -> tuple:
    return (rgb[0], rgb[1], rgb[2], alpha)


@dataclass
class IntroParticle:
    angle: float
    radius: float
    size: float
    speed: float
    opacity: float


@dataclass
class AmbientParticle:
    x: float
    y: float
    size: float
    speed_x: float
    speed_y: float
    opacity: float
    tone: str


@dataclass
class FogBlob:
    x: float
    y: float
    radius: float
    speed_x: float
    speed_y: float
    opacity: float


@dataclass
class CloudBand:
    y: float
    speed: float
    amplitude: float
    opacity: float


class IntroScene:

    def __init__(self, width: int, height: int, rng: Optional[random.Random] = None):
        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self.intro_particles: list[IntroParticle] = []
        self.ambient_particles: list[AmbientParticle] = []
        self.fog_blobs: list[FogBlob] = []
        self.cloud_bands: list[CloudBand] = []
        self.seed()

    # ------------------------------------------------------------------
    # Pools
    # ------------------------------------------------------------------

    def _signed(self) -> int:
        return 1 if self.rng.random() > 0.5 else -1

    def seed(self) -> None:
        rng = self.rng
        w, h = self.width, self.height

        self.intro_particles = [
            IntroParticle(
                angle=rng.random() * math.pi * 2,
                radius=rng.random() * 40 + 20,
                size=rng.random() * 2 + 2,
                speed=(rng.random() * 0.6 + 0.2) * self._signed(),
                opacity=rng.random() * 0.35 + 0.15,
            )
            for _ in range(3 + int(rng.random() * 3))
        ]

        self.ambient_particles = [
            AmbientParticle(
                x=rng.random() * w,
                y=rng.random() * h,
                size=rng.random() * 1.5 + 0.5,
                speed_x=(rng.random() - 0.5) * 0.15,
                speed_y=(rng.random() - 0.5) * 0.08,
                opacity=rng.random() * 0.4 + 0.2,
                tone="purple" if rng.random() > 0.5 else "silver",
            )
            for _ in range(min(int(math.floor(w * 0.06)), MAX_AMBIENT_PARTICLES))
        ]

        self.fog_blobs = [
            FogBlob(
                x=rng.random() * w,
                y=rng.random() * h,
                radius=rng.random() * 200 + 180,
                speed_x=(rng.random() - 0.5) * 0.2,
                speed_y=(rng.random() - 0.5) * 0.12,
                opacity=rng.random() * 0.08 + 0.05,
            )
            for _ in range(FOG_BLOB_COUNT)
        ]

        self.cloud_bands = [
            CloudBand(
                y=h * (0.18 + i * 0.12),
                speed=(rng.random() * 0.12 + 0.04) * self._signed(),
                amplitude=rng.random() * 30 + 20,
                opacity=rng.random() * 0.25 + 0.2,
            )
            for i in range(CLOUD_BAND_COUNT)
        ]

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.seed()

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def draw(self, renderer: Renderer, elapsed: float, now: float,
             cursor: Optional[CursorTracker] = None) -> None:
        progress = scene_progress(elapsed)

        with renderer.layer("background"):
            self.draw_background(renderer, progress)
        if progress > 0:
            with renderer.layer("clouds"):
                self.draw_clouds(renderer, now, progress)
            with renderer.layer("sigil"):
                self.draw_sigil(renderer, now, progress)
            with renderer.layer("fog"):
                self.draw_fog(renderer, progress)
            with renderer.layer("ambient_particles"):
                self.draw_ambient_particles(renderer, progress)
        if elapsed <= TITLE_FADE_MS:
            with renderer.layer("intro_particles"):
                self.draw_intro_particles(renderer, elapsed)
        if cursor is not None:
            with renderer.layer("cursor_trails"):
                self.draw_trails(renderer, cursor, now)
            with renderer.layer("footprints"):
                self.draw_footprints(renderer, cursor, now)

    def draw_background(self, r: Renderer, progress: float) -> None:
        w, h = self.width, self.height
        r.clear((0, 0, 0, 1))
        if progress <= 0:
            return

        r.set_alpha(ease_in_out(progress))
        wash = r.linear_gradient(0, 0, 0, h)
        wash.add_stop(0, (11, 21, 24, 1)).add_stop(0.38, (13, 29, 35, 1))
        wash.add_stop(0.75, (17, 42, 49, 1)).add_stop(1, (26, 50, 56, 1))
        r.fill_rect(0, 0, w, h, wash)

        vignette = r.radial_gradient(w * 0.5, h * 0.45, w * 0.15, w * 0.85)
        vignette.add_stop(0, (0, 0, 0, 0)).add_stop(1, (3, 8, 10, 0.82))
        r.fill_rect(0, 0, w, h, vignette)

        # soft vertical light columns
        r.set_composite(SCREEN)
        for i in range(6):
            x = (i / 5) * w
            beam = r.linear_gradient(x - 100, 0, x + 100, 0)
            beam.add_stop(0, (120, 190, 200, 0)).add_stop(0.5, (145, 210, 220, 0.065))
            beam.add_stop(1, (120, 190, 200, 0))
            r.fill_rect(x - 120, 0, 240, h, beam)

    def draw_clouds(self, r: Renderer, now: float, progress: float) -> None:
        w, h = self.width, self.height
        r.set_alpha(0.56 * progress)
        r.set_blur(28)

        for index, band in enumerate(self.cloud_bands):
            offset = (now * 0.00009 * band.speed) * w
            base_y = band.y + math.sin(now * 0.0005 + index * 0.7) * 14
            height = 95 + index * 18

            gradient = r.linear_gradient(0, base_y - height, 0, base_y + height)
            gradient.add_stop(0, (95, 118, 126, 0))
            gradient.add_stop(0.5, (122, 150, 162, band.opacity * 0.95))
            gradient.add_stop(1, (95, 118, 126, 0))

            points = [(-w, base_y)]
            x = -w
            while x <= w * 2:
                wave_a = math.sin((x + offset) * 0.0033 + index * 0.6) * band.amplitude
                wave_b = math.cos((x + offset) * 0.0018 + index) * band.amplitude * 0.45
                points.append((x, base_y + wave_a + wave_b))
                x += 90
            points += [(w * 2, base_y + height), (-w, base_y + height)]
            r.fill_polygon(points, gradient)

        # dense lower fog layer
        r.set_blur(22)
        floor = r.linear_gradient(0, h * 0.5, 0, h)
        floor.add_stop(0, (88, 108, 118, 0)).add_stop(0.55, (103, 129, 140, 0.42))
        floor.add_stop(1, (118, 146, 154, 0.66))
        r.fill_rect(0, h * 0.48, w, h * 0.55, floor)

    def draw_sigil(self, r: Renderer, now: float, progress: float) -> None:
        size = min(self.width, self.height) * 0.22
        ring = size * 1.85
        pulse = 0.74 + 0.26 * math.sin(now * 0.0014)
        spin_a = now * 0.00016
        spin_b = -now * 0.00009

        r.translate(self.width * 0.5, self.height * 0.44)
        r.set_alpha(0.96 * progress)

        aura = r.radial_gradient(0, 0, 0, ring * 1.1)
        aura.add_stop(0, (176, 227, 238, 0.24)).add_stop(0.45, (98, 166, 181, 0.19))
        aura.add_stop(1, (52, 94, 108, 0))
        r.fill_circle(0, 0, ring * 1.08, aura)

        with r.saved():
            r.rotate(spin_a)
            r.set_shadow(34, (103, 174, 186, 0.7))
            r.stroke_circle(0, 0, ring, (214, 229, 234, 0.93), 4)
            r.set_shadow(0, TRANSPARENT)
            self._draw_ticks(r, ring)
            self._draw_runes(r, ring)

        with r.saved():
            r.rotate(spin_b)
            r.stroke_circle(0, 0, size * 1.05, (168, 204, 214, 0.58), 2)

        for i in range(6):
            with r.saved():
                r.rotate((i / 6) * math.pi * 2 + spin_a * 0.35)
                self._draw_petal(r, size, now, i, pulse)

        for i in range(4):
            a = i * (math.pi / 2) + spin_b * 0.6
            r.line(math.cos(a) * size * 0.45, math.sin(a) * size * 0.45,
                   math.cos(a) * size * 1.18, math.sin(a) * size * 1.18, (222, 236, 240, 0.72), 2.3)

        core = r.radial_gradient(0, 0, 0, size * 0.5)
        core.add_stop(0, (255, 255, 255, 0.95)).add_stop(0.35, (210, 233, 238, 0.95))
        core.add_stop(0.7, (76, 125, 144, 0.92)).add_stop(1, (30, 61, 73, 0.3))
        r.fill_circle(0, 0, size * 0.5, core)

        inner = r.radial_gradient(0, 0, 0, size * 0.16)
        inner.add_stop(0, (255, 255, 255, 1)).add_stop(1, (178, 224, 232, 0.22))
        r.fill_circle(0, 0, size * 0.16, inner)

        with r.saved():
            r.rotate(spin_a * 1.4)
            for i in range(4):
                a = i * (math.pi / 2)
                r.line(math.cos(a) * size * 0.03, math.sin(a) * size * 0.03,
                       math.cos(a) * size * 0.26, math.sin(a) * size * 0.26, (244, 248, 249, 0.78), 1.6)

    def _draw_ticks(self, r: Renderer, ring: float) -> None:
        for i in range(40):
            a = (i / 40) * math.pi * 2
            r.line(math.cos(a) * (ring - 10), math.sin(a) * (ring - 10),
                   math.cos(a) * (ring + 7), math.sin(a) * (ring + 7), (220, 233, 236, 0.72), 1.25)

    def _draw_runes(self, r: Renderer, ring: float) -> None:
        color = (214, 226, 232, 0.78)
        for i in range(24):
            a = (i / 24) * math.pi * 2
            with r.saved():
                r.translate(math.cos(a) * (ring - 22), math.sin(a) * (ring - 22))
                r.rotate(a + math.pi / 2)
                r.line(0, -8, 0, 8, color, 1.05)
                r.line(-4, -3, 4, -3, color, 1.05)
                if i % 2 == 0:
                    r.line(-3, 4, 3, 7, color, 1.05)
                else:
                    r.line(-3, 7, 3, 4, color, 1.05)

    def _draw_petal(self, r: Renderer, size: float, now: float, i: int, pulse: float) -> None:
        width = size * 0.24
        length = size * (1.22 + 0.06 * math.sin(now * 0.001 + i))
        gradient = r.linear_gradient(0, -length, 0, size * 0.12)
        gradient.add_stop(0, (245, 249, 250, 0.96 * pulse))
        gradient.add_stop(0.35, (212, 228, 232, 0.8 * pulse))
        gradient.add_stop(1, (136, 177, 184, 0.08))

        tip, base = (0, -length), (0, size * 0.12)
        outline = quadratic_points(tip, (width, -length * 0.25), base)
        outline += quadratic_points(base, (-width, -length * 0.25), tip)[1:]
        r.fill_polygon(outline, gradient)
        r.line(0, -length * 0.95, 0, size * 0.08, (235, 243, 245, 0.52 * pulse), 1)

    def draw_fog(self, r: Renderer, progress: float) -> None:
        w, h = self.width, self.height
        reveal = ease_in_out(progress)
        r.clip_circle(w * 0.5, h * 0.45, max(w, h) * 0.82 * reveal)

        for fog in self.fog_blobs:
            gradient = r.radial_gradient(fog.x, fog.y, 0, fog.radius)
            gradient.add_stop(0, (150, 188, 197, fog.opacity * 0.7 * reveal))
            gradient.add_stop(0.6, (78, 108, 122, fog.opacity * 0.52 * reveal))
            gradient.add_stop(1, TRANSPARENT)
            r.fill_circle(fog.x, fog.y, fog.radius, gradient)

            fog.x += fog.speed_x
            fog.y += fog.speed_y
            if fog.x < -fog.radius:
                fog.x = w + fog.radius
            if fog.x > w + fog.radius:
                fog.x = -fog.radius
            if fog.y < -fog.radius:
                fog.y = h + fog.radius
            if fog.y > h + fog.radius:
                fog.y = -fog.radius

    def draw_ambient_particles(self, r: Renderer, progress: float) -> None:
        w, h = self.width, self.height
        for p in self.ambient_particles:
            color = (218, 228, 232) if p.tone == "silver" else (126, 186, 198)
            gradient = r.radial_gradient(p.x, p.y, 0, p.size * 3)
            gradient.add_stop(0, rgba(color, p.opacity * progress)).add_stop(1, TRANSPARENT)
            r.fill_circle(p.x, p.y, p.size * 2.2, gradient)

            p.x += p.speed_x
            p.y += p.speed_y
            if p.x < 0:
                p.x = w
            if p.x > w:
                p.x = 0
            if p.y < 0:
                p.y = h
            if p.y > h:
                p.y = 0

    def draw_intro_particles(self, r: Renderer, elapsed: float) -> None:
        expand = clamp(elapsed / TITLE_MS, 0.0, 1.0)
        collapse = clamp((elapsed - TITLE_MS) / (TITLE_FADE_MS - TITLE_MS), 0.0, 1.0)
        cx, cy = self.width / 2, self.height / 2

        for p in self.intro_particles:
            p.angle += p.speed * 0.01
            radius = p.radius * (0.6 + 0.6 * expand) * (1 - 0.8 * collapse)
            x = cx + math.cos(p.angle) * radius
            y = cy + math.sin(p.angle) * radius
            gradient = r.radial_gradient(x, y, 0, p.size * 4)
            gradient.add_stop(0, rgba(LAVENDER, p.opacity * (1 - 0.85 * collapse))).add_stop(1, TRANSPARENT)
            r.fill_circle(x, y, p.size * (1.1 - 0.3 * collapse), gradient)

    def draw_trails(self, r: Renderer, cursor: CursorTracker, now: float) -> None:
        for trail in cursor.trails:
            age = (now - trail.created) / TRAIL_LIFE_MS
            size = 10 + 8 * (1 - age)
            gradient = r.radial_gradient(trail.x, trail.y, 0, size)
            gradient.add_stop(0, rgba(LAVENDER, (1 - age) * 0.25)).add_stop(1, TRANSPARENT)
            r.fill_circle(trail.x, trail.y, size, gradient)

    def draw_footprints(self, r: Renderer, cursor: CursorTracker, now: float) -> None:
        for footprint in cursor.footprints:
            age = (now - footprint.created) / FOOTPRINT_LIFE_MS
            size = footprint.size * (1 - 0.3 * age)
            gradient = r.radial_gradient(footprint.x, footprint.y, 0, size * 2)
            gradient.add_stop(0, rgba(LAVENDER, (1 - age) * 0.35)).add_stop(1, TRANSPARENT)
            r.fill_circle(footprint.x, footprint.y, size, gradient)
