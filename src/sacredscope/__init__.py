"""
sacredscope: audio-reactive sacred geometry visualizer.

Turns spectrum frames into musical features, context and an emotional
color palette, then renders one of eight procedural scenes.
"""

from sacredscope.config import VisualizerConfig, load_config
from sacredscope.core import (
    AudioFeatures,
    Color,
    ColorPalette,
    ContextClassifier,
    FeatureAnalyzer,
    MusicContext,
    PaletteGenerator,
    VisualMode,
)
from sacredscope.pipeline import AnalysisPipeline, Snapshot
from sacredscope.session import VisualizerSession
from sacredscope.visualizers import PygameCanvas, SceneRenderer

__version__ = "0.1.0"

__all__ = [
    "VisualizerConfig",
    "load_config",
    "AudioFeatures",
    "Color",
    "ColorPalette",
    "ContextClassifier",
    "FeatureAnalyzer",
    "MusicContext",
    "PaletteGenerator",
    "VisualMode",
    "AnalysisPipeline",
    "Snapshot",
    "VisualizerSession",
    "PygameCanvas",
    "SceneRenderer",
]
