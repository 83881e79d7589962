"""
Emotional palette generation module.

Maps features and musical context to an HSL palette, refines it for
beat drops, vocals, density and intensity, then smooths it against
recent palettes so colors drift rather than flicker.
"""

import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from sacredscope.core.analyzer import AudioFeatures, Mood
from sacredscope.core.color import Color, hue_delta
from sacredscope.core.context import Genre, MusicContext
from sacredscope.core.history import RollingHistory

PALETTE_HISTORY_CAPACITY = 10
DEFAULT_TRANSITION_SPEED = 0.1
MIN_PARTICLES = 3
MAX_PARTICLES = 8

# Red, orange, yellow
WARM_HUES = (0.0, 30.0, 60.0)


@dataclass(frozen=True)
class ColorMood:
    """Intermediate color character derived from features and context."""

    name: str
    temperature: str  # "warm", "cool" or "neutral"
    saturation: float
    brightness: float
    contrast: float


@dataclass(frozen=True)
class ColorPalette:
    """Named colors plus a variable-length particle list."""

    primary: Color
    secondary: Color
    accent: Color
    background: Color
    glow: Color
    particles: tuple[Color, ...] = field(default_factory=tuple)

    def named(self) -> dict[str, Color]:
        return {
            "primary": self.primary,
            "secondary": self.secondary,
            "accent": self.accent,
            "background": self.background,
            "glow": self.glow,
        }

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {name: color.to_css() for name, color in self.named().items()}
        data["particles"] = [color.to_css() for color in self.particles]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ColorPalette":
        return cls(
            primary=Color.from_css(data["primary"]),
            secondary=Color.from_css(data["secondary"]),
            accent=Color.from_css(data["accent"]),
            background=Color.from_css(data["background"]),
            glow=Color.from_css(data["glow"]),
            particles=tuple(Color.from_css(c) for c in data.get("particles", [])),
        )


def particle_count(energy: float) -> int:
    """Number of base particle colors for a given energy (3-8)."""
    count = int(math.floor(3 + energy * 5))
    return max(MIN_PARTICLES, min(MAX_PARTICLES, count))


def shift_towards_warmth(hue: float, amount: float) -> float:
    """Move ``hue`` a fraction of the way to the nearest warm hue."""
    nearest = min(WARM_HUES, key=lambda warm: abs(hue_delta(hue, warm)))
    return hue + hue_delta(hue, nearest) * amount


def mood_name(mood: Mood, energy: float, harmony: float) -> str:
    intensity = "intense" if energy > 0.6 else "moderate" if energy > 0.3 else "gentle"
    harmony_level = "harmonious" if harmony > 0.6 else "balanced" if harmony > 0.3 else "chaotic"
    return f"{intensity}-{mood.value}-{harmony_level}"


def base_hue(features: AudioFeatures, context: MusicContext) -> float:
    """Genre-keyed base hue, wrapped to [0, 360)."""
    genre = context.genre_hint
    if genre is Genre.ELECTRONIC:
        hue = 240 + features.bass * 60  # blue to purple
    elif genre is Genre.ACOUSTIC:
        hue = 30 + features.harmony * 60  # orange to yellow
    elif genre is Genre.CLASSICAL:
        hue = 200 + features.harmony * 80
    elif genre is Genre.ROCK:
        hue = 0 + features.energy * 60  # red to orange
    elif genre is Genre.AMBIENT:
        hue = 180 + features.mid * 120  # cyan to purple
    elif genre is Genre.VOICE:
        hue = 45 + context.emotional_intensity * 90 if context.vocal_presence else 200
    else:
        hue = features.bass * 120 + features.treble * 240
    return float(hue) % 360.0


class PaletteGenerator:
    """
    Produces temporally smoothed palettes, one per analysis tick.

    Randomness (particle jitter, complexity hue variation) comes from an
    injectable numpy Generator so output can be pinned in tests.
    """

    def __init__(
        self,
        transition_speed: float = DEFAULT_TRANSITION_SPEED,
        history_capacity: int = PALETTE_HISTORY_CAPACITY,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ):
        """
        Initialize the generator.

        Args:
            transition_speed: Blend factor toward each new palette (0.01-1).
            history_capacity: Number of published palettes kept.
            rng: Random source for jitter. Built from ``seed`` when None.
            seed: Seed for the default random source.
        """
        self.transition_speed = DEFAULT_TRANSITION_SPEED
        self.set_transition_speed(transition_speed)
        self.history: RollingHistory[ColorPalette] = RollingHistory(history_capacity)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def set_transition_speed(self, speed: float):
        self.transition_speed = max(0.01, min(1.0, float(speed)))

    @property
    def current(self) -> ColorPalette | None:
        return self.history.last()

    def analyze_mood(self, features: AudioFeatures, context: MusicContext) -> ColorMood:
        temperature = "neutral"
        if features.bass > 0.6 or context.genre_hint is Genre.ELECTRONIC:
            temperature = "cool"
        if features.harmony > 0.6 or context.genre_hint is Genre.ACOUSTIC:
            temperature = "warm"
        if features.mood in (Mood.MYSTERIOUS, Mood.DRAMATIC):
            temperature = "cool"

        saturation = min(100.0, 40 + features.energy * 60 + features.dynamics * 30)
        brightness = min(100.0, 30 + features.treble * 40 + context.emotional_intensity * 30)
        # Not consumed downstream; exposed for inspection
        contrast = min(100.0, 20 + features.dynamics * 50 + features.energy * 30)

        return ColorMood(
            name=mood_name(features.mood, features.energy, features.harmony),
            temperature=temperature,
            saturation=saturation,
            brightness=brightness,
            contrast=contrast,
        )

    def generate_particle_colors(
        self,
        hue: float,
        saturation: float,
        lightness: float,
        energy: float,
    ) -> tuple[Color, ...]:
        count = particle_count(energy)
        colors = []
        for i in range(count):
            particle_hue = hue + (360.0 / count) * i
            particle_sat = saturation + self.rng.uniform(-15.0, 15.0)
            particle_light = lightness + self.rng.uniform(-20.0, 20.0)
            colors.append(Color(
                particle_hue,
                particle_sat,
                max(10.0, min(90.0, particle_light)),
            ))
        return tuple(colors)

    def create_base_palette(
        self,
        features: AudioFeatures,
        context: MusicContext,
        mood: ColorMood,
    ) -> ColorPalette:
        hue = base_hue(features, context)
        saturation = mood.saturation
        lightness = mood.brightness

        return ColorPalette(
            primary=Color(hue, saturation, lightness),
            secondary=Color(hue + 120, saturation * 0.8, lightness * 0.9),
            accent=Color(hue + 240, saturation * 1.2, lightness * 1.1),
            background=Color(hue + 180, saturation * 0.3, lightness * 0.2),
            glow=Color(hue, saturation * 1.5, lightness * 1.3),
            particles=self.generate_particle_colors(hue, saturation, lightness, features.energy),
        )

    def _intensify(self, color: Color, factor: float) -> Color:
        return Color(
            color.hue,
            min(100.0, color.saturation * factor),
            min(90.0, color.lightness * factor),
        )

    def intensify_palette(self, palette: ColorPalette, factor: float) -> ColorPalette:
        return ColorPalette(
            primary=self._intensify(palette.primary, factor),
            secondary=palette.secondary,
            accent=self._intensify(palette.accent, factor),
            background=palette.background,
            glow=self._intensify(palette.glow, factor),
            particles=tuple(self._intensify(c, factor) for c in palette.particles),
        )

    def add_warmth(self, palette: ColorPalette, amount: float) -> ColorPalette:
        def warmify(color: Color) -> Color:
            return color.with_hue(shift_towards_warmth(color.hue, amount))

        return ColorPalette(
            primary=warmify(palette.primary),
            secondary=warmify(palette.secondary),
            accent=palette.accent,
            background=palette.background,
            glow=warmify(palette.glow),
            particles=palette.particles,
        )

    def add_complexity(self, particles: tuple[Color, ...]) -> tuple[Color, ...]:
        if not particles:
            return particles
        extra_count = min(5, int(math.floor(len(particles) * 0.5)))
        extras = []
        for i in range(extra_count):
            source = particles[i % len(particles)]
            extras.append(source.with_hue(source.hue + self.rng.uniform(-30.0, 30.0)))
        return particles + tuple(extras)

    def adjust_saturation(self, palette: ColorPalette, intensity: float) -> ColorPalette:
        factor = 1.0 + intensity * 0.5

        def adjust(color: Color) -> Color:
            return Color(color.hue, min(100.0, color.saturation * factor), color.lightness)

        return ColorPalette(
            primary=adjust(palette.primary),
            secondary=adjust(palette.secondary),
            accent=adjust(palette.accent),
            background=palette.background,
            glow=palette.glow,
            particles=tuple(adjust(c) for c in palette.particles),
        )

    def refine_for_context(self, palette: ColorPalette, context: MusicContext) -> ColorPalette:
        """Apply beat-drop, vocal, density and intensity refinements in order."""
        refined = palette
        if context.beat_drop:
            refined = self.intensify_palette(refined, 1.5)
        if context.vocal_presence:
            refined = self.add_warmth(refined, 0.3)
        if context.instrumental_density > 0.7:
            refined = ColorPalette(
                primary=refined.primary,
                secondary=refined.secondary,
                accent=refined.accent,
                background=refined.background,
                glow=refined.glow,
                particles=self.add_complexity(refined.particles),
            )
        if context.emotional_intensity > 0.8:
            refined = self.adjust_saturation(refined, context.emotional_intensity)
        return refined

    def smooth_transition(self, palette: ColorPalette) -> ColorPalette:
        """Blend the last published palette toward ``palette``."""
        last = self.history.last()
        if last is None:
            return palette

        speed = self.transition_speed
        particles = tuple(
            last.particles[i].blend(color, speed) if i < len(last.particles) else color
            for i, color in enumerate(palette.particles)
        )
        return ColorPalette(
            primary=last.primary.blend(palette.primary, speed),
            secondary=last.secondary.blend(palette.secondary, speed),
            accent=last.accent.blend(palette.accent, speed),
            background=last.background.blend(palette.background, speed),
            glow=last.glow.blend(palette.glow, speed),
            particles=particles,
        )

    def generate(self, features: AudioFeatures, context: MusicContext) -> ColorPalette:
        """
        Produce the palette for one analysis tick.

        Args:
            features: Features for this tick.
            context: Context for this tick.

        Returns:
            The smoothed palette, also pushed onto the history.
        """
        mood = self.analyze_mood(features, context)
        base = self.create_base_palette(features, context, mood)
        refined = self.refine_for_context(base, context)
        final = self.smooth_transition(refined)
        self.history.push(final)
        return final

    def reset(self):
        self.history.clear()
