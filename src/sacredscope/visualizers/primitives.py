"""
Backend-agnostic immediate-mode draw primitives.

Scenes emit these in paint order; a canvas backend turns them into pixels.
"""

from dataclasses import dataclass, field
from typing import Union

from sacredscope.core.color import Color

Point = tuple[float, float]


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float
    fill: Color | None = None
    stroke: Color | None = None
    line_width: float = 1.0
    alpha: float = 1.0
    shadow_color: Color | None = None
    shadow_blur: float = 0.0


@dataclass(frozen=True)
class Polyline:
    """Open (or closed) stroked path."""

    points: tuple[Point, ...]
    stroke: Color
    line_width: float = 1.0
    alpha: float = 1.0
    closed: bool = False
    shadow_color: Color | None = None
    shadow_blur: float = 0.0


@dataclass(frozen=True)
class Polygon:
    """Filled closed path."""

    points: tuple[Point, ...]
    fill: Color
    alpha: float = 1.0


@dataclass(frozen=True)
class RadialGradient:
    """Radial gradient filling the rectangle (x, y, width, height)."""

    center: Point
    inner_radius: float
    outer_radius: float
    stops: tuple[tuple[float, Color], ...]
    rect: tuple[float, float, float, float] = field(default=(0.0, 0.0, 0.0, 0.0))


Primitive = Union[Circle, Polyline, Polygon, RadialGradient]
