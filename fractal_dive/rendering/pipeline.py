"""
Image production pipeline.

Every pixel is projected through the camera, evaluated by the fractal and
converted by a painter. Pixels are independent; the work is split into row
bands by :class:`~fractal_dive.acceleration.parallel.ParallelRenderer`.
"""

import logging
from typing import Callable, Optional, Tuple

import numpy as np

from ..acceleration.parallel import ParallelRenderer, RowBand
from ..core.camera import Camera
from ..core.fractal_types import Fractal

logger = logging.getLogger(__name__)

Painter = Callable[[np.ndarray], np.ndarray]


def produce_image(fractal: Fractal, camera: Camera, dimensions: Tuple[int, int],
                  painter: Painter, workers: Optional[int] = None) -> np.ndarray:
    """
    Render a raster of the fractal as seen by the camera.

    Args:
        fractal: Fractal to evaluate
        camera: Pixel to plane mapping
        dimensions: Raster (width, height)
        painter: Maps an array of escape counts to pixel values
        workers: Worker threads (None for CPU count)

    Returns:
        uint8 array of shape (height, width) or (height, width, channels)
    """
    width, height = dimensions

    # The painter decides the pixel layout
    probe = np.asarray(painter(np.zeros((1, 1), dtype=np.uint8)))
    output = np.zeros((height, width) + probe.shape[2:], dtype=probe.dtype)

    if width == 0 or height == 0:
        return output

    def compute_band(band: RowBand) -> np.ndarray:
        real, imag = camera.project_grid(0, width, band.y_start, band.y_end)
        return painter(fractal.escape_counts(real, imag))

    logger.debug(f"Producing {width}x{height} {fractal.name} image")
    return ParallelRenderer(workers).render(compute_band, output)
