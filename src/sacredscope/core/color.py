"""
HSL color value type.

Every Color is normalized on construction: hue wraps into [0, 360),
saturation and lightness clip into [0, 100].
"""

import colorsys
import math
import re
from dataclasses import dataclass

_CSS_PATTERN = re.compile(
    r"hsl\(\s*([-+0-9.eE]+)\s*,\s*([-+0-9.eE]+)%\s*,\s*([-+0-9.eE]+)%\s*\)"
)


def wrap_hue(hue: float) -> float:
    """Wrap a hue angle into [0, 360)."""
    wrapped = float(hue) % 360.0
    # -1e-20 % 360 rounds to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, float(value)))


def hue_delta(h1: float, h2: float) -> float:
    """Signed shortest-arc distance from h1 to h2, in [-180, 180)."""
    return ((h2 - h1 + 180.0) % 360.0) - 180.0


@dataclass(frozen=True)
class Color:
    """A color in HSL space (hue degrees, saturation %, lightness %)."""

    hue: float
    saturation: float
    lightness: float

    def __post_init__(self):
        object.__setattr__(self, "hue", wrap_hue(self.hue))
        object.__setattr__(self, "saturation", clamp(self.saturation, 0.0, 100.0))
        object.__setattr__(self, "lightness", clamp(self.lightness, 0.0, 100.0))

    def with_hue(self, hue: float) -> "Color":
        return Color(hue, self.saturation, self.lightness)

    def scaled(self, saturation: float = 1.0, lightness: float = 1.0) -> "Color":
        """Multiply saturation/lightness; the result is clamped."""
        return Color(self.hue, self.saturation * saturation, self.lightness * lightness)

    def blend(self, target: "Color", factor: float) -> "Color":
        """
        Move this color toward ``target`` by ``factor``.

        Hue travels the shortest arc; saturation and lightness are linear.
        """
        return Color(
            self.hue + hue_delta(self.hue, target.hue) * factor,
            self.saturation + (target.saturation - self.saturation) * factor,
            self.lightness + (target.lightness - self.lightness) * factor,
        )

    def to_rgb(self) -> tuple[int, int, int]:
        """Convert to an 8-bit RGB tuple."""
        r, g, b = colorsys.hls_to_rgb(
            self.hue / 360.0, self.lightness / 100.0, self.saturation / 100.0
        )
        return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))

    def to_css(self) -> str:
        # repr-formatted floats so from_css() restores the exact triple
        return f"hsl({self.hue!r}, {self.saturation!r}%, {self.lightness!r}%)"

    @classmethod
    def from_css(cls, text: str) -> "Color":
        match = _CSS_PATTERN.fullmatch(text.strip())
        if match is None:
            raise ValueError(f"Not an hsl() color: {text!r}")
        h, s, l = (float(g) for g in match.groups())
        if not all(math.isfinite(v) for v in (h, s, l)):
            raise ValueError(f"Non-finite hsl() component: {text!r}")
        return cls(h, s, l)

    def __str__(self) -> str:
        return self.to_css()
