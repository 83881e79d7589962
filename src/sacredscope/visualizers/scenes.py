"""
Procedural scene generators, one per visual mode.

Maps audio features to geometry:
- Harmony → segment and wave counts
- Tempo → rotation and orbit speed
- Energy → radius and distance
- Dynamics → stroke glow and particle size
- Per-bin amplitude → local intensity of every element

Every scene is a pure function of its inputs. When no palette or
features have been published yet, scenes fall back to fixed colors
and neutral multipliers.
"""

import abc
import math
from typing import Sequence

import numpy as np

from sacredscope.core.analyzer import AudioFeatures
from sacredscope.core.color import Color
from sacredscope.core.modes import VisualMode
from sacredscope.core.palette import ColorPalette
from sacredscope.visualizers.primitives import (
    Circle,
    Polygon,
    Polyline,
    Primitive,
    RadialGradient,
)

TAU = math.pi * 2


def sample(frame: Sequence[float], index: int) -> float:
    """Read ``frame[index]``; missing indices read as 0."""
    if 0 <= index < len(frame):
        return float(frame[index])
    return 0.0


def band_average(frame: Sequence[float], start: int, stop: int) -> float:
    """Mean over a 128-bin-referenced slice, scaled to the frame length."""
    n = len(frame)
    lo, hi = (start * n) // 128, (stop * n) // 128
    if hi <= lo:
        return 0.0
    return float(np.mean(np.asarray(frame[lo:hi], dtype=np.float64)))


def pick(colors: Sequence[Color], index: int, fallback: Color) -> Color:
    if not colors:
        return fallback
    return colors[index % len(colors)]


class Scene(abc.ABC):
    """A visual mode: turns one frame of state into draw primitives."""

    mode: VisualMode

    @property
    def name(self) -> str:
        return self.mode.value

    @abc.abstractmethod
    def render(
        self,
        frame: Sequence[float],
        time: float,
        features: AudioFeatures | None,
        palette: ColorPalette | None,
        width: float,
        height: float,
    ) -> list[Primitive]:
        """Produce primitives for one display frame, in paint order."""


class SacredScene(Scene):
    """Rotating polygon rings, one per harmonic segment."""

    mode = VisualMode.SACRED

    def render(self, frame, time, features, palette, width, height):
        cx, cy = width / 2, height / 2
        segments = int(6 + features.harmony * 6) if features and features.harmony else 6
        rotation_speed = features.tempo / 120 if features else 0.5
        particles = palette.particles if palette else ()
        step = len(frame) // segments

        out: list[Primitive] = []
        for i in range(segments):
            angle = (i / segments) * TAU
            intensity = sample(frame, i * step)
            reach = 150 * features.energy if features and features.energy else 100
            radius = 50 + intensity * reach

            color = pick(particles, i, Color(270 + i * 20, 70, 65 + intensity * 30))
            width_scale = features.dynamics * 5 if features and features.dynamics else 3
            points = tuple(
                (
                    cx + math.cos(angle + (j / segments) * TAU + time * rotation_speed) * radius,
                    cy + math.sin(angle + (j / segments) * TAU + time * rotation_speed) * radius,
                )
                for j in range(segments + 1)
            )
            blur_scale = features.energy * 30 if features and features.energy else 20
            out.append(Polyline(
                points=points,
                stroke=color,
                line_width=2 + intensity * width_scale,
                shadow_color=palette.glow if palette else None,
                shadow_blur=intensity * blur_scale if palette else 0.0,
            ))

            # Inner dot on bass peaks
            if features and sample(frame, 0) > 0.7:
                out.append(Circle(
                    center=(cx, cy),
                    radius=radius * 0.3,
                    fill=palette.accent if palette else color,
                ))
        return out


class CosmicScene(Scene):
    """Radial particle field with trailing dots and bursts on spikes."""

    mode = VisualMode.COSMIC

    def render(self, frame, time, features, palette, width, height):
        cx, cy = width / 2, height / 2
        particles = palette.particles if palette else ()
        speed = features.tempo / 120 if features else 1.0
        n = len(frame)

        out: list[Primitive] = []
        for i in range(n):
            intensity = sample(frame, i)
            if intensity < 0.1:
                continue

            angle = (i / n) * TAU + time * (0.2 * speed)
            reach = 300 * features.energy if features and features.energy else 200
            distance = 100 + intensity * reach
            x = cx + math.cos(angle) * distance
            y = cy + math.sin(angle) * distance
            size_scale = features.dynamics * 12 if features and features.dynamics else 8
            size = 2 + intensity * size_scale
            color = pick(particles, i, Color((220 + i * 2) % 360, 70, 55 + intensity * 20))

            out.append(Circle(
                center=(x, y),
                radius=size,
                fill=color,
                shadow_color=palette.glow if palette else None,
                shadow_blur=size * 2 if palette else 0.0,
            ))

            trail = (
                cx + math.cos(angle - 0.1) * (distance - 20),
                cy + math.sin(angle - 0.1) * (distance - 20),
            )
            trail_color = palette.secondary if palette else Color((220 + i * 2) % 360, 70, 35 + intensity * 10)
            out.append(Circle(center=trail, radius=size * 0.5, fill=trail_color))

            if features and intensity > 0.6 and sample(frame, i // 4) > 0.5:
                burst_color = palette.accent if palette else color
                for burst in range(3):
                    burst_angle = angle + burst * TAU / 3
                    out.append(Circle(
                        center=(x + math.cos(burst_angle) * size * 2, y + math.sin(burst_angle) * size * 2),
                        radius=size * 0.3,
                        fill=burst_color,
                    ))
        return out


class FlowScene(Scene):
    """Superposed sine waves spanning the full width."""

    mode = VisualMode.FLOW

    X_STEP = 2

    def render(self, frame, time, features, palette, width, height):
        cy = height / 2
        wave_count = int(2 + features.harmony * 4) if features and features.harmony else 3
        harmony_scale = features.harmony if features and features.harmony else 1.0
        colors = palette.particles if palette else ()
        n = len(frame)

        out: list[Primitive] = []
        for wave in range(wave_count):
            color = pick(colors, wave, Color(180 + wave * 30, 70, 60 + wave * 10))
            points = []
            for x in range(0, int(math.ceil(width)), self.X_STEP):
                intensity = sample(frame, int(math.floor((x / width) * n)))
                y = (
                    cy
                    + math.sin(x * 0.02 + time * (1 + wave * 0.5)) * (30 + intensity * 50 * harmony_scale)
                    + math.sin(x * 0.01 + time * 0.3) * (20 + intensity * 30) * (wave + 1)
                )
                points.append((float(x), y))
            out.append(Polyline(points=tuple(points), stroke=color, line_width=2 + wave))
        return out


class PulseScene(Scene):
    """Three concentric rings sized by bass, mid and high sub-bands."""

    mode = VisualMode.PULSE

    def render(self, frame, time, features, palette, width, height):
        cx, cy = width / 2, height / 2
        bass = band_average(frame, 0, 16)
        mid = band_average(frame, 16, 64)
        high = band_average(frame, 64, 128)
        energy = features.energy if features and features.energy else 1.0

        return [
            Circle(
                center=(cx, cy),
                radius=80 + bass * 120 * energy,
                stroke=palette.primary if palette else Color(270, 70, 65 + bass * 30),
                line_width=3 + bass * 5,
            ),
            Circle(
                center=(cx, cy),
                radius=50 + mid * 80 * energy,
                stroke=palette.secondary if palette else Color(220, 70, 55 + mid * 30),
                line_width=2 + mid * 4,
            ),
            Circle(
                center=(cx, cy),
                radius=20 + high * 40 * energy,
                stroke=palette.accent if palette else Color(180, 70, 60 + high * 30),
                line_width=1 + high * 3,
            ),
        ]


class TrippyScene(Scene):
    """Scanning particles with five fading trail steps."""

    mode = VisualMode.TRIPPY

    TRAIL_STEPS = 5

    def render(self, frame, time, features, palette, width, height):
        colors = palette.particles if palette else ()
        n = len(frame)

        out: list[Primitive] = []
        for i in range(0, n, 4):
            intensity = sample(frame, i)
            if intensity < 0.1:
                continue

            x = (i / n) * width
            phase = time * 3 + i * 0.1
            y = height / 2 + math.sin(phase) * intensity * 100
            cycle_hue = time * 100 + i * 10
            out.append(Circle(
                center=(x, y),
                radius=intensity * 10,
                fill=pick(colors, i, Color(cycle_hue, 100, 50)),
            ))

            for trail in range(1, self.TRAIL_STEPS + 1):
                out.append(Circle(
                    center=(x, y + math.sin(phase - trail * 0.2) * intensity * 20),
                    radius=intensity * (6 - trail),
                    fill=pick(colors, i, Color(cycle_hue + trail * 60, 80, 50 - trail * 5)),
                    alpha=0.7 - trail * 0.1,
                ))
        return out


class OceanScene(Scene):
    """Four translucent wave layers stacked from the bottom edge."""

    mode = VisualMode.OCEAN

    LAYERS = 4
    X_STEP = 5
    DEFAULT_COLORS = (Color(200, 70, 50), Color(220, 60, 60), Color(180, 80, 40))

    def render(self, frame, time, features, palette, width, height):
        colors = palette.particles if palette and palette.particles else self.DEFAULT_COLORS
        n = len(frame)

        out: list[Primitive] = []
        for layer in range(self.LAYERS):
            wave_height = height * 0.2 + layer * 20
            base_y = height - wave_height
            points = []
            for x in range(0, int(math.floor(width)) + 1, self.X_STEP):
                intensity = sample(frame, int(math.floor((x / width) * n)))
                y = (
                    base_y
                    + math.sin(x * 0.005 + time * (0.5 + layer * 0.2)) * intensity * 50
                    + math.sin(x * 0.002 + time * 0.3) * 30
                )
                points.append((float(x), y))
            points.extend([(float(width), float(height)), (0.0, float(height))])
            out.append(Polygon(
                points=tuple(points),
                fill=colors[layer % len(colors)],
                alpha=0.3 - layer * 0.05,
            ))
        return out


class NeuralScene(Scene):
    """Ring of nodes linked when both ends are active and close together."""

    mode = VisualMode.NEURAL

    NODE_COUNT = 20
    LINK_THRESHOLD = 0.3
    LINK_DISTANCE = 150.0
    GLOW_THRESHOLD = 0.6

    def nodes(self, frame, time, width, height) -> list[tuple[float, float, float]]:
        cx, cy = width / 2, height / 2
        step = len(frame) // self.NODE_COUNT
        result = []
        for i in range(self.NODE_COUNT):
            angle = (i / self.NODE_COUNT) * TAU
            radius = 100 + math.sin(time + i) * 50
            result.append((
                cx + math.cos(angle) * radius,
                cy + math.sin(angle) * radius,
                sample(frame, i * step),
            ))
        return result

    def render(self, frame, time, features, palette, width, height):
        nodes = self.nodes(frame, time, width, height)

        out: list[Primitive] = []
        for i, (x1, y1, a) in enumerate(nodes):
            for x2, y2, b in nodes[i + 1:]:
                distance = math.hypot(x1 - x2, y1 - y2)
                if distance < self.LINK_DISTANCE and a > self.LINK_THRESHOLD and b > self.LINK_THRESHOLD:
                    out.append(Polyline(
                        points=((x1, y1), (x2, y2)),
                        stroke=palette.secondary if palette else Color(60, 70, 30 + (a + b) * 25),
                        line_width=(a + b) * 2,
                        alpha=0.6,
                    ))

        for x, y, intensity in nodes:
            if intensity < 0.1:
                continue
            glowing = intensity > self.GLOW_THRESHOLD
            out.append(Circle(
                center=(x, y),
                radius=3 + intensity * 8,
                fill=palette.accent if palette else Color(300, 70, 50 + intensity * 30),
                shadow_color=(palette.glow if palette else Color(300, 100, 50)) if glowing else None,
                shadow_blur=20.0 if glowing else 0.0,
            ))
        return out


class GalaxyScene(Scene):
    """Gradient backdrop, twinkling orbiting stars and one spiral arm."""

    mode = VisualMode.GALAXY

    STAR_COUNT = 100
    SPIRAL_TURNS = math.pi * 8
    SPIRAL_STEP = 0.1
    DEFAULT_COLORS = (
        Color(0, 0, 100),
        Color(36, 100, 83.333),
        Color(204, 100, 83.333),
        Color(276, 100, 83.333),
    )

    def render(self, frame, time, features, palette, width, height):
        cx, cy = width / 2, height / 2
        colors = palette.particles if palette and palette.particles else self.DEFAULT_COLORS
        n = len(frame)

        out: list[Primitive] = [RadialGradient(
            center=(cx, cy),
            inner_radius=0.0,
            outer_radius=max(width, height) / 2,
            stops=(
                (0.0, palette.background if palette else Color(240, 20, 5)),
                (1.0, Color(240, 30, 2)),
            ),
            rect=(0.0, 0.0, float(width), float(height)),
        )]

        for i in range(self.STAR_COUNT):
            intensity = sample(frame, i % n) if n else 0.0
            if intensity < 0.2:
                continue
            color = colors[i % len(colors)]
            twinkle = intensity > 0.7
            out.append(Circle(
                center=(
                    math.sin(i * 0.1 + time * 0.1) * width / 2 + cx,
                    math.cos(i * 0.1 + time * 0.05) * height / 2 + cy,
                ),
                radius=intensity * 3,
                fill=color,
                shadow_color=color if twinkle else None,
                shadow_blur=intensity * 15 if twinkle else 0.0,
            ))

        steps = int(math.ceil(self.SPIRAL_TURNS / self.SPIRAL_STEP))
        for k in range(steps):
            angle = k * self.SPIRAL_STEP
            radius = angle * 10
            intensity = sample(frame, int(math.floor((angle / self.SPIRAL_TURNS) * n)))
            if intensity > 0.1:
                out.append(Circle(
                    center=(
                        cx + math.cos(angle + time * 0.2) * radius,
                        cy + math.sin(angle + time * 0.2) * radius,
                    ),
                    radius=intensity * 2,
                    fill=palette.primary if palette else Color(angle * 20, 70, 60),
                    alpha=min(1.0, intensity),
                ))
        return out


SCENES: dict[VisualMode, type[Scene]] = {
    scene.mode: scene
    for scene in (
        SacredScene,
        CosmicScene,
        FlowScene,
        PulseScene,
        TrippyScene,
        OceanScene,
        NeuralScene,
        GalaxyScene,
    )
}
