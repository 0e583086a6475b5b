"""
Camera mapping screen pixels to the complex plane.
"""

import logging
from dataclasses import dataclass, replace
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)

# Plane distance covered by the shorter screen side at zoom 1.0
VIEW_SPAN = 4.0


@dataclass
class Camera:
    """
    Screen to complex plane mapping.

    ``zoom`` scales the plane distance covered by one pixel, so halving it
    halves the view width. A larger zoom therefore shows a wider view, it is
    not a magnification. The per-pixel scale is normalized by the shorter
    screen side, which keeps the mapping independent of the render
    resolution: scaling ``screen_size`` and a pixel coordinate by the same
    factor projects to the same plane point.
    """

    screen_size: Tuple[float, float]
    center: complex = 0j
    zoom: float = 1.0

    @property
    def pixel_scale(self) -> float:
        """Plane distance between two adjacent pixels."""
        width, height = self.screen_size
        return self.zoom * VIEW_SPAN / min(width, height)

    def project(self, px: float, py: float) -> complex:
        """Convert pixel coordinates to a complex number."""
        width, height = self.screen_size
        scale = self.pixel_scale
        real = self.center.real + (px - width / 2.0) * scale
        imag = self.center.imag + (py - height / 2.0) * scale
        return complex(real, imag)

    def project_grid(self, x_start: int, x_end: int,
                     y_start: int, y_end: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Create coordinate arrays for a block of pixels.

        Args:
            x_start, x_end: Column range (end exclusive)
            y_start, y_end: Row range (end exclusive)

        Returns:
            Tuple of (real_coords, imag_coords) arrays of shape (rows, cols)
        """
        width, height = self.screen_size
        scale = self.pixel_scale
        xs = np.arange(x_start, x_end, dtype=np.float64)
        ys = np.arange(y_start, y_end, dtype=np.float64)
        real = self.center.real + (xs - width / 2.0) * scale
        imag = self.center.imag + (ys - height / 2.0) * scale
        return np.meshgrid(real, imag)

    def zoom_to(self, target: Tuple[float, float], new_zoom: float) -> None:
        """
        Center the camera on the plane point under ``target`` and set the zoom.

        Args:
            target: Pixel (x, y) to center on
            new_zoom: Zoom factor after the move
        """
        self.center = self.project(*target)
        self.zoom = float(new_zoom)
        logger.debug(f"Camera centered on {self.center} at zoom {self.zoom:e}")

    def copy(self) -> 'Camera':
        return replace(self)

    def with_screen_size(self, screen_size: Tuple[float, float]) -> 'Camera':
        return replace(self, screen_size=(float(screen_size[0]), float(screen_size[1])))
