"""Analysis core: features, context and palettes."""

from sacredscope.core.analyzer import AudioFeatures, FeatureAnalyzer, Mood
from sacredscope.core.color import Color
from sacredscope.core.context import ContextClassifier, Genre, MusicContext
from sacredscope.core.modes import VisualMode
from sacredscope.core.palette import ColorMood, ColorPalette, PaletteGenerator

__all__ = [
    "AudioFeatures",
    "FeatureAnalyzer",
    "Mood",
    "Color",
    "ContextClassifier",
    "Genre",
    "MusicContext",
    "VisualMode",
    "ColorMood",
    "ColorPalette",
    "PaletteGenerator",
]
