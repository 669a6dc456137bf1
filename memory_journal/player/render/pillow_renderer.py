"""
==========================
Render - Pillow Renderer
==========================

Software renderer for the intro scene built on Pillow (shape masks, Gaussian blur, PNG output)
and numpy (gradients and compositing). Every primitive is rasterized into a coverage mask,
shaded with a flat color or a gradient evaluated in the primitive's local coordinates, then
composited onto an opaque RGB canvas with the current alpha, clip, blur and composite mode.

Usage:
>>> from memory_journal.player.render.pillow_renderer import PillowRenderer
>>> renderer = PillowRenderer(480, 270)
>>> renderer.clear((0, 0, 0, 1))
>>> renderer.fill_circle(240, 135, 40, (200, 180, 255, 0.5))
>>> renderer.save_png("frame.png")

*Author: Sudharshan TK*\n
*Created: 2025-09-09*
"""

from typing import Optional

import numpy as np
from PIL import Image, ImageDraw, ImageFilter

from memory_journal.player.render.base import SCREEN, LinearGradient, RadialGradient, Renderer


def _color_channels(color) -> tuple:
    r, g, b = color[0], color[1], color[2]
    alpha = color[3] if len(color) > 3 else 1.0
    return (r / 255.0, g / 255.0, b / 255.0, float(alpha))


class PillowRenderer(Renderer):

    def __init__(self, width: int, height: int):
        super().__init__(width, height)
        self.canvas = np.zeros((self.height, self.width, 3), dtype=np.float32)
        ys, xs = np.mgrid[0:self.height, 0:self.width].astype(np.float32)
        self._xs = xs + 0.5
        self._ys = ys + 0.5

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_image(self) -> Image.Image:
        pixels = np.clip(self.canvas * 255.0 + 0.5, 0, 255).astype(np.uint8)
        return Image.fromarray(pixels)

    def save_png(self, path) -> None:
        self.to_image().save(path, format="PNG")

    # ------------------------------------------------------------------
    # Rasterization helpers
    # ------------------------------------------------------------------

    def _new_mask(self):
        image = Image.new("L", (self.width, self.height), 0)
        return image, ImageDraw.Draw(image)

    def _points(self, points) -> list:
        transform = self.state.transform
        return [transform.apply(x, y) for x, y in points]

    def _clip_mask(self) -> Optional[np.ndarray]:
        if self.state.clip is None:
            return None
        cx, cy, radius = self.state.clip
        inside = (self._xs - cx) ** 2 + (self._ys - cy) ** 2 <= radius * radius
        return inside.astype(np.float32)

    def _blur(self, array: np.ndarray, radius: float) -> np.ndarray:
        # GaussianBlur works on 8-bit bands; values are in [0, 1]
        image = Image.fromarray(np.clip(array * 255.0 + 0.5, 0, 255).astype(np.uint8))
        return np.asarray(image.filter(ImageFilter.GaussianBlur(radius)), dtype=np.float32) / 255.0

    def _shade(self, fill) -> tuple:
        """
        Return `(rgb, alpha)` for a fill: scalars/tuples for a flat color,
        per-pixel arrays for gradients.
        """
        if isinstance(fill, (LinearGradient, RadialGradient)):
            return self._gradient(fill)
        r, g, b, a = _color_channels(fill)
        return np.array([r, g, b], dtype=np.float32), a

    def _gradient(self, gradient) -> tuple:
        inverse = self.state.transform.inverse()
        lx = inverse.a * self._xs + inverse.c * self._ys + inverse.e
        ly = inverse.b * self._xs + inverse.d * self._ys + inverse.f

        if isinstance(gradient, LinearGradient):
            dx, dy = gradient.x1 - gradient.x0, gradient.y1 - gradient.y0
            length_sq = dx * dx + dy * dy or 1.0
            t = ((lx - gradient.x0) * dx + (ly - gradient.y0) * dy) / length_sq
        else:
            distance = np.sqrt((lx - gradient.x) ** 2 + (ly - gradient.y) ** 2)
            span = (gradient.r1 - gradient.r0) or 1.0
            t = (distance - gradient.r0) / span
        t = np.clip(t, 0.0, 1.0)

        stops = sorted(gradient.stops, key=lambda stop: stop[0])
        if not stops:
            return np.zeros(3, dtype=np.float32), 0.0
        offsets = [offset for offset, _ in stops]
        channels = list(zip(*[_color_channels(color) for _, color in stops]))
        rgb = np.stack([np.interp(t, offsets, channels[i]) for i in range(3)], axis=-1)
        alpha = np.interp(t, offsets, channels[3])
        return rgb.astype(np.float32), alpha.astype(np.float32)

    def _composite(self, mask_image: Image.Image, fill, blur: float = None) -> None:
        coverage = np.asarray(mask_image, dtype=np.float32) / 255.0
        rgb, alpha = self._shade(fill)
        coverage = coverage * alpha * self.state.alpha

        blur = self.state.blur if blur is None else blur
        if np.ndim(rgb) == 1:
            rgb = np.broadcast_to(rgb, self.canvas.shape)
        if blur > 0:
            premultiplied = np.stack([self._blur(rgb[..., i] * coverage, blur) for i in range(3)], axis=-1)
            coverage = self._blur(coverage, blur)
            rgb = np.divide(premultiplied, coverage[..., None], out=np.zeros_like(premultiplied),
                            where=coverage[..., None] > 1e-6)

        clip = self._clip_mask()
        if clip is not None:
            coverage = coverage * clip

        coverage = np.clip(coverage, 0.0, 1.0)[..., None]
        if self.state.composite == SCREEN:
            self.canvas = 1.0 - (1.0 - self.canvas) * (1.0 - rgb * coverage)
        else:
            self.canvas = rgb * coverage + self.canvas * (1.0 - coverage)

    def _with_shadow(self, mask_image: Image.Image, fill) -> None:
        if self.state.shadow_blur > 0 and self.state.shadow_color[3] > 0:
            self._composite(mask_image, self.state.shadow_color, blur=self.state.shadow_blur / 2)
        self._composite(mask_image, fill)

    def _line_width(self, width: float) -> int:
        return max(1, int(round(width * self.state.transform.scale)))

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def clear(self, color):
        r, g, b, _ = _color_channels(color)
        self.canvas[...] = (r, g, b)

    def fill_rect(self, x, y, w, h, fill):
        self.fill_polygon([(x, y), (x + w, y), (x + w, y + h), (x, y + h)], fill)

    def fill_polygon(self, points, fill):
        image, draw = self._new_mask()
        draw.polygon(self._points(points), fill=255)
        self._with_shadow(image, fill)

    def fill_circle(self, x, y, radius, fill):
        if radius <= 0:
            return
        cx, cy = self.state.transform.apply(x, y)
        r = radius * self.state.transform.scale
        image, draw = self._new_mask()
        draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=255)
        self._with_shadow(image, fill)

    def stroke_circle(self, x, y, radius, color, width):
        if radius <= 0:
            return
        cx, cy = self.state.transform.apply(x, y)
        r = radius * self.state.transform.scale
        image, draw = self._new_mask()
        draw.ellipse((cx - r, cy - r, cx + r, cy + r), outline=255, width=self._line_width(width))
        self._with_shadow(image, color)

    def stroke_polyline(self, points, color, width):
        if len(points) < 2:
            return
        image, draw = self._new_mask()
        draw.line(self._points(points), fill=255, width=self._line_width(width), joint="curve")
        self._with_shadow(image, color)
