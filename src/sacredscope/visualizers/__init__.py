"""Scene generators, draw primitives and the pygame canvas."""

from sacredscope.visualizers.canvas import PygameCanvas
from sacredscope.visualizers.primitives import Circle, Polygon, Polyline, Primitive, RadialGradient
from sacredscope.visualizers.renderer import SceneRenderer
from sacredscope.visualizers.scenes import SCENES, Scene

__all__ = [
    "PygameCanvas",
    "Circle",
    "Polygon",
    "Polyline",
    "Primitive",
    "RadialGradient",
    "SceneRenderer",
    "SCENES",
    "Scene",
]
