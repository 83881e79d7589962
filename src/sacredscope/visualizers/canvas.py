"""
Pygame drawing backend for scene primitives.
"""

import math
from typing import Callable, Iterable

import numpy as np
import pygame

from sacredscope.core.color import Color
from sacredscope.visualizers.primitives import (
    Circle,
    Polygon,
    Polyline,
    Primitive,
    RadialGradient,
)

RGB = tuple[int, int, int]
DrawFn = Callable[[pygame.Surface, tuple[int, int], tuple], None]


def _offset(points, offset: tuple[int, int]) -> list[tuple[float, float]]:
    ox, oy = offset
    return [(x + ox, y + oy) for x, y in points]


def _bounds(points, pad: float) -> pygame.Rect:
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    left = math.floor(min(xs) - pad)
    top = math.floor(min(ys) - pad)
    return pygame.Rect(left, top, math.ceil(max(xs) + pad) - left + 1, math.ceil(max(ys) + pad) - top + 1)


class PygameCanvas:
    """
    Paints primitive lists onto pygame Surfaces.

    Translucent primitives go through a per-primitive SRCALPHA layer;
    glows are approximated with expanding low-alpha halos.
    """

    GLOW_LAYERS = 3
    GRADIENT_STEPS = 20

    def __init__(
        self,
        background_color: RGB = (5, 5, 15),
        trail_alpha: int = 0,
    ):
        """
        Initialize the canvas.

        Args:
            background_color: Clear color.
            trail_alpha: Frame persistence (0-100); 0 clears every frame.
        """
        self.background_color = background_color
        self.trail_alpha = trail_alpha

    def _paint(self, surface: pygame.Surface, color: Color, alpha: float, rect: pygame.Rect, draw: DrawFn):
        alpha = max(0.0, min(1.0, alpha))
        if alpha <= 0.0:
            return
        rgb = color.to_rgb()
        if alpha >= 1.0:
            draw(surface, (0, 0), rgb)
            return

        clipped = rect.clip(surface.get_rect())
        if clipped.width <= 0 or clipped.height <= 0:
            return
        layer = pygame.Surface(clipped.size, pygame.SRCALPHA)
        draw(layer, (-clipped.x, -clipped.y), (*rgb, int(round(alpha * 255))))
        surface.blit(layer, clipped.topleft)

    def _draw_circle(self, surface: pygame.Surface, circle: Circle):
        if circle.radius <= 0:
            return
        cx, cy = circle.center

        if circle.shadow_color is not None and circle.shadow_blur > 0:
            for k in range(self.GLOW_LAYERS, 0, -1):
                halo = circle.radius + circle.shadow_blur * k / self.GLOW_LAYERS
                rect = pygame.Rect(int(cx - halo) - 1, int(cy - halo) - 1, int(halo * 2) + 3, int(halo * 2) + 3)
                self._paint(
                    surface, circle.shadow_color, circle.alpha * 0.25 / k, rect,
                    lambda target, off, rgba, r=halo: pygame.draw.circle(
                        target, rgba, (cx + off[0], cy + off[1]), r
                    ),
                )

        rect = pygame.Rect(
            int(cx - circle.radius) - 1, int(cy - circle.radius) - 1,
            int(circle.radius * 2) + 3, int(circle.radius * 2) + 3,
        )
        if circle.fill is not None:
            self._paint(
                surface, circle.fill, circle.alpha, rect,
                lambda target, off, rgba: pygame.draw.circle(
                    target, rgba, (cx + off[0], cy + off[1]), circle.radius
                ),
            )
        if circle.stroke is not None:
            width = max(1, int(round(circle.line_width)))
            self._paint(
                surface, circle.stroke, circle.alpha, rect.inflate(width * 2, width * 2),
                lambda target, off, rgba: pygame.draw.circle(
                    target, rgba, (cx + off[0], cy + off[1]), circle.radius, width
                ),
            )

    def _draw_polyline(self, surface: pygame.Surface, line: Polyline):
        if len(line.points) < 2:
            return
        width = max(1, int(round(line.line_width)))

        if line.shadow_color is not None and line.shadow_blur > 0:
            for k in range(self.GLOW_LAYERS, 0, -1):
                halo_width = width + max(1, int(line.shadow_blur * k / self.GLOW_LAYERS))
                self._paint(
                    surface, line.shadow_color, line.alpha * 0.25 / k,
                    _bounds(line.points, halo_width),
                    lambda target, off, rgba, w=halo_width: pygame.draw.lines(
                        target, rgba, line.closed, _offset(line.points, off), w
                    ),
                )

        self._paint(
            surface, line.stroke, line.alpha, _bounds(line.points, width),
            lambda target, off, rgba: pygame.draw.lines(
                target, rgba, line.closed, _offset(line.points, off), width
            ),
        )

    def _draw_polygon(self, surface: pygame.Surface, polygon: Polygon):
        if len(polygon.points) < 3:
            return
        self._paint(
            surface, polygon.fill, polygon.alpha, _bounds(polygon.points, 1),
            lambda target, off, rgba: pygame.draw.polygon(
                target, rgba, _offset(polygon.points, off)
            ),
        )

    def _gradient_color(self, gradient: RadialGradient, ratio: float) -> RGB:
        stops = sorted(gradient.stops, key=lambda s: s[0])
        if ratio <= stops[0][0]:
            return stops[0][1].to_rgb()
        for (p0, c0), (p1, c1) in zip(stops, stops[1:]):
            if ratio <= p1:
                t = 0.0 if p1 == p0 else (ratio - p0) / (p1 - p0)
                a, b = c0.to_rgb(), c1.to_rgb()
                return tuple(int(a[i] + (b[i] - a[i]) * t) for i in range(3))
        return stops[-1][1].to_rgb()

    def _draw_gradient(self, surface: pygame.Surface, gradient: RadialGradient):
        if not gradient.stops:
            return
        x, y, w, h = gradient.rect
        rect = pygame.Rect(int(x), int(y), int(w), int(h)) if w > 0 and h > 0 else surface.get_rect()
        previous_clip = surface.get_clip()
        surface.set_clip(rect)
        surface.fill(self._gradient_color(gradient, 1.0), rect)

        # Concentric circles from the rim inward
        span = gradient.outer_radius - gradient.inner_radius
        center = (int(gradient.center[0]), int(gradient.center[1]))
        for i in range(self.GRADIENT_STEPS, 0, -1):
            ratio = i / self.GRADIENT_STEPS
            radius = int(gradient.inner_radius + span * ratio)
            if radius > 0:
                pygame.draw.circle(surface, self._gradient_color(gradient, ratio), center, radius)
        surface.set_clip(previous_clip)

    def draw(self, surface: pygame.Surface, primitives: Iterable[Primitive]):
        """Paint ``primitives`` onto ``surface`` in order."""
        for primitive in primitives:
            if isinstance(primitive, Circle):
                self._draw_circle(surface, primitive)
            elif isinstance(primitive, Polyline):
                self._draw_polyline(surface, primitive)
            elif isinstance(primitive, Polygon):
                self._draw_polygon(surface, primitive)
            elif isinstance(primitive, RadialGradient):
                self._draw_gradient(surface, primitive)
            else:
                raise TypeError(f"Unsupported primitive: {type(primitive).__name__}")

    def render_frame(
        self,
        primitives: Iterable[Primitive],
        size: tuple[int, int],
        previous_surface: pygame.Surface | None = None,
    ) -> pygame.Surface:
        """
        Render primitives onto a fresh surface.

        Args:
            primitives: Primitives in paint order.
            size: (width, height) of the output.
            previous_surface: Previous frame for the trail effect.

        Returns:
            Rendered pygame Surface.
        """
        surface = pygame.Surface(size)

        if previous_surface is not None and self.trail_alpha > 0 and previous_surface.get_size() == size:
            fade = pygame.Surface(size)
            fade.fill(self.background_color)
            fade.set_alpha(int((100 - self.trail_alpha) / 100 * 80) + 5)
            previous_surface.blit(fade, (0, 0))
            surface.blit(previous_surface, (0, 0))
        else:
            surface.fill(self.background_color)

        self.draw(surface, primitives)
        return surface

    @staticmethod
    def surface_to_array(surface: pygame.Surface) -> np.ndarray:
        """Convert a surface to an (H, W, 3) uint8 array."""
        # pygame uses (width, height) but numpy expects (height, width)
        return np.transpose(pygame.surfarray.array3d(surface), (1, 0, 2))
