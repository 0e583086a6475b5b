"""
Autonomous fractal diving.

This library renders Mandelbrot and Julia sets and dives into them on its
own: it repeatedly picks a target pixel on an edge of the current view,
zooms toward it and re-renders, then composes a supersampled, colorized
final image.

Example usage:
    >>> from fractal_dive import Generator
    >>> generator = Generator.from_seed(42, dive_dimensions=(200, 150))
    >>> info, image = generator.generate()
    >>> print(info)
"""

__version__ = "1.0.0"
__author__ = "Fractal Dive Team"

from fractal_dive.core.camera import Camera
from fractal_dive.core.fractal_types import Fractal, FractalKind, create_fractal
from fractal_dive.core.gradient import Gradient
from fractal_dive.rendering.coloring import GradientPainter, flame_gradient, grayscale_painter
from fractal_dive.rendering.pipeline import produce_image
from fractal_dive.rendering.compositor import compose
from fractal_dive.rendering.image_output import ImageExporter, RenderMetadata
from fractal_dive.exploration.selector import find_target_point, select_target
from fractal_dive.exploration.dive import DiveLoop, DiveResult, Termination, dive
from fractal_dive.config import ConfigurationError, DiveConfig

# Main API classes
from fractal_dive.api import GenerationInfo, Generator

__all__ = [
    "Generator",
    "GenerationInfo",
    "DiveConfig",
    "ConfigurationError",
    "Fractal",
    "FractalKind",
    "create_fractal",
    "Camera",
    "Gradient",
    "GradientPainter",
    "flame_gradient",
    "grayscale_painter",
    "produce_image",
    "compose",
    "find_target_point",
    "select_target",
    "DiveLoop",
    "DiveResult",
    "Termination",
    "dive",
    "ImageExporter",
    "RenderMetadata",
]
