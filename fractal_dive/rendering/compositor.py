"""
Final image composition: supersampled render, then triangle-filtered shrink.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from ..core.camera import Camera
from ..core.fractal_types import Fractal
from ..core.gradient import Gradient
from .coloring import GradientPainter
from .filters import downsample
from .pipeline import produce_image

logger = logging.getLogger(__name__)

DEFAULT_SUPERSAMPLING = 4


def compose(fractal: Fractal, camera: Camera, dimensions: Tuple[int, int],
            supersampling: int = DEFAULT_SUPERSAMPLING,
            gradient: Optional[Gradient] = None,
            workers: Optional[int] = None) -> np.ndarray:
    """
    Render the final anti-aliased RGB image.

    The camera's ``screen_size`` is set to the supersampled resolution so
    the view stays the same; the camera is left in that state.

    Args:
        fractal: Fractal to render
        camera: Camera at the end of the dive
        dimensions: Output (width, height)
        supersampling: Per-axis supersampling factor
        gradient: Color gradient (flame palette if None)
        workers: Worker threads (None for CPU count)

    Returns:
        uint8 RGB array of shape (height, width, 3)
    """
    width, height = dimensions
    big_width, big_height = width * supersampling, height * supersampling
    camera.screen_size = (float(big_width), float(big_height))

    if width == 0 or height == 0:
        return np.zeros((height, width, 3), dtype=np.uint8)

    logger.info(f"Composing {width}x{height} image from a {big_width}x{big_height} render")
    image = produce_image(fractal, camera, (big_width, big_height), GradientPainter(gradient), workers)

    if supersampling == 1:
        return image
    return downsample(image, (width, height))
