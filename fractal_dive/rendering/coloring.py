"""
Colors, palettes and painters.

A painter converts an array of escape counts into pixel values, element by
element. The image pipeline calls it once per row band.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..core.fractal_types import MAX_ITERATIONS
from ..core.gradient import Gradient

logger = logging.getLogger(__name__)


@dataclass
class ColorRGB:
    """RGB color representation."""
    r: float
    g: float
    b: float

    def __post_init__(self):
        """Validate RGB values."""
        for component in [self.r, self.g, self.b]:
            if not 0 <= component <= 1:
                raise ValueError("RGB components must be between 0 and 1")

    def to_tuple(self) -> Tuple[float, float, float]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def to_array(self) -> np.ndarray:
        return np.array(self.to_tuple(), dtype=np.float64)


# Linear sRGB stops of the flame palette
FLAME_STOPS = (
    (0.0, ColorRGB(0.0, 0.027, 0.392)),
    (0.16, ColorRGB(0.125, 0.42, 0.796)),
    (0.42, ColorRGB(0.929, 1.0, 1.0)),
    (0.6425, ColorRGB(1.0, 0.667, 0.0)),
    (0.8575, ColorRGB(0.0, 0.008, 0.0)),
    (1.0, ColorRGB(0.0, 0.0, 0.0)),
)


def flame_gradient() -> Gradient:
    """Deep blue through cyan, white and orange, back to black near the cap."""
    return Gradient([(position, color.to_array()) for position, color in FLAME_STOPS])


def grayscale_painter(counts: np.ndarray) -> np.ndarray:
    """Use the escape count directly as luminance."""
    return counts.astype(np.uint8, copy=False)


class GradientPainter:
    """Paint escape counts through a color gradient."""

    def __init__(self, gradient: Optional[Gradient] = None, max_count: int = MAX_ITERATIONS):
        """
        Initialize painter.

        Args:
            gradient: Color gradient over [0, 1] (flame palette if None)
            max_count: Count mapped to the end of the gradient
        """
        self.gradient = gradient if gradient is not None else flame_gradient()
        self.max_count = max_count

        # Counts are bytes, so the whole palette fits in a lookup table
        self.lut = np.zeros((256, 3), dtype=np.uint8)
        for count in range(256):
            color = np.clip(self.gradient.get(count / max_count), 0.0, 1.0)
            self.lut[count] = (color * 255).astype(np.uint8)

    def __call__(self, counts: np.ndarray) -> np.ndarray:
        return self.lut[counts]
