"""
==========================
Render - Renderer Interface
==========================

Drawing surface used by the intro scene. It mirrors the small subset of a 2D canvas the scene
needs: filled and stroked primitives, linear and radial gradients, a circular clip, affine
transforms, global alpha, blur, shadow and a composite mode, all scoped by `save()`/`restore()`.

Colors are `(r, g, b, a)` tuples with channels in 0-255 and alpha in 0-1.

*Author: Sudharshan TK*\n
*Created: 2025-09-09*
"""

import abc
import contextlib
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

Color = tuple
Point = tuple

TRANSPARENT = (0, 0, 0, 0.0)

SOURCE_OVER = "source-over"
SCREEN = "screen"


@dataclass
class LinearGradient:
    x0: float
    y0: float
    x1: float
    y1: float
    stops: list = field(default_factory=list)

    def add_stop(self, offset: float, color: Color) -> "LinearGradient":
        self.stops.append((offset, color))
        return self


@dataclass
class RadialGradient:
    x: float
    y: float
    r0: float
    r1: float
    stops: list = field(default_factory=list)

    def add_stop(self, offset: float, color: Color) -> "RadialGradient":
        self.stops.append((offset, color))
        return self


Fill = Union[Color, LinearGradient, RadialGradient]


class Affine:
    """
    2D affine transform `(a, b, c, d, e, f)` mapping (x, y) to (a*x + c*y + e, b*x + d*y + f).
    """

    __slots__ = ("a", "b", "c", "d", "e", "f")

    def __init__(self, a=1.0, b=0.0, c=0.0, d=1.0, e=0.0, f=0.0):
        self.a, self.b, self.c, self.d, self.e, self.f = a, b, c, d, e, f

    def copy(self) -> "Affine":
        return Affine(self.a, self.b, self.c, self.d, self.e, self.f)

    def multiply(self, other: "Affine") -> "Affine":
        return Affine(
            self.a * other.a + self.c * other.b,
            self.b * other.a + self.d * other.b,
            self.a * other.c + self.c * other.d,
            self.b * other.c + self.d * other.d,
            self.a * other.e + self.c * other.f + self.e,
            self.b * other.e + self.d * other.f + self.f,
        )

    def apply(self, x: float, y: float) -> Point:
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def inverse(self) -> "Affine":
        det = self.a * self.d - self.b * self.c
        if det == 0:
            raise ValueError("transform is not invertible")
        a, b, c, d = self.d / det, -self.b / det, -self.c / det, self.a / det
        return Affine(a, b, c, d, -(a * self.e + c * self.f), -(b * self.e + d * self.f))

    @property
    def scale(self) -> float:
        return math.sqrt(abs(self.a * self.d - self.b * self.c))


@dataclass
class DrawState:
    transform: Affine = field(default_factory=Affine)
    alpha: float = 1.0
    blur: float = 0.0
    composite: str = SOURCE_OVER
    clip: Optional[tuple] = None
    shadow_blur: float = 0.0
    shadow_color: Color = TRANSPARENT

    def copy(self) -> "DrawState":
        return DrawState(self.transform.copy(), self.alpha, self.blur, self.composite,
                         self.clip, self.shadow_blur, self.shadow_color)


class Renderer(abc.ABC):

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.state = DrawState()
        self._stack: list[DrawState] = []

    # State

    def save(self) -> None:
        self._stack.append(self.state.copy())

    def restore(self) -> None:
        if self._stack:
            self.state = self._stack.pop()

    @contextlib.contextmanager
    def saved(self):
        self.save()
        try:
            yield self
        finally:
            self.restore()

    @contextlib.contextmanager
    def layer(self, name: str):
        """Named drawing pass; scoped like `saved()`."""
        with self.saved():
            yield self

    def translate(self, dx: float, dy: float) -> None:
        self.state.transform = self.state.transform.multiply(Affine(e=dx, f=dy))

    def rotate(self, angle: float) -> None:
        cos, sin = math.cos(angle), math.sin(angle)
        self.state.transform = self.state.transform.multiply(Affine(cos, sin, -sin, cos))

    def set_alpha(self, alpha: float) -> None:
        self.state.alpha = min(max(alpha, 0.0), 1.0)

    def set_blur(self, radius: float) -> None:
        self.state.blur = max(0.0, radius)

    def set_composite(self, mode: str) -> None:
        self.state.composite = mode

    def set_shadow(self, blur: float, color: Color) -> None:
        self.state.shadow_blur = max(0.0, blur)
        self.state.shadow_color = color

    def clip_circle(self, x: float, y: float, radius: float) -> None:
        cx, cy = self.state.transform.apply(x, y)
        self.state.clip = (cx, cy, radius * self.state.transform.scale)

    # Gradients

    def linear_gradient(self, x0, y0, x1, y1) -> LinearGradient:
        return LinearGradient(x0, y0, x1, y1)

    def radial_gradient(self, x, y, r0, r1) -> RadialGradient:
        return RadialGradient(x, y, r0, r1)

    # Primitives

    @abc.abstractmethod
    def clear(self, color: Color) -> None:
        ...

    @abc.abstractmethod
    def fill_rect(self, x: float, y: float, w: float, h: float, fill: Fill) -> None:
        ...

    @abc.abstractmethod
    def fill_circle(self, x: float, y: float, radius: float, fill: Fill) -> None:
        ...

    @abc.abstractmethod
    def fill_polygon(self, points: Sequence[Point], fill: Fill) -> None:
        ...

    @abc.abstractmethod
    def stroke_circle(self, x: float, y: float, radius: float, color: Color, width: float) -> None:
        ...

    @abc.abstractmethod
    def stroke_polyline(self, points: Sequence[Point], color: Color, width: float) -> None:
        ...

    def line(self, x0, y0, x1, y1, color: Color, width: float) -> None:
        self.stroke_polyline([(x0, y0), (x1, y1)], color, width)


def quadratic_points(p0: Point, control: Point, p1: Point, steps: int = 12) -> list[Point]:
    """Sample a quadratic Bezier curve, endpoints included."""
    points = []
    for i in range(steps + 1):
        t = i / steps
        u = 1 - t
        points.append((
            u * u * p0[0] + 2 * u * t * control[0] + t * t * p1[0],
            u * u * p0[1] + 2 * u * t * control[1] + t * t * p1[1],
        ))
    return points
