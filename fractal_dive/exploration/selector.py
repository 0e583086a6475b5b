"""
Target-point selection.

Diving into a flat dark interior gives dull images; diving onto an edge that
borders it gives detail. The selector therefore searches from a random pixel
toward the nearest dark region of a blurred render, then from there toward
the nearest strong edge.
"""

import logging
from collections import deque
from typing import Callable, Optional, Tuple

import numpy as np

from ..core.camera import Camera
from ..core.fractal_types import Fractal
from ..rendering.coloring import grayscale_painter
from ..rendering.filters import blur, edges
from ..rendering.pipeline import produce_image

logger = logging.getLogger(__name__)

DARKNESS_THRESHOLD = 128
EDGE_THRESHOLD = 128

# Left, up, right, down
NEIGHBOR_OFFSETS = ((-1, 0), (0, -1), (1, 0), (0, 1))

Pixel = Tuple[int, int]


def find_point(start: Pixel, raster: np.ndarray,
               predicate: Callable[[np.ndarray], np.ndarray]) -> Optional[Pixel]:
    """
    Find the pixel nearest to ``start`` that satisfies ``predicate``.

    Breadth-first search over the 4-connected pixel grid, every step costs
    one. Pixels are tested when dequeued, so ``start`` itself may match.

    Args:
        start: Starting pixel (x, y)
        raster: 2D array searched
        predicate: Vectorized test applied to the whole raster

    Returns:
        Matching pixel (x, y), or None if no pixel matches
    """
    mask = np.asarray(predicate(raster), dtype=bool)
    if not mask.any():
        return None

    height, width = mask.shape
    matches = mask.tolist()
    visited = bytearray(width * height)

    x, y = start
    visited[y * width + x] = 1
    frontier = deque([(x, y)])

    while frontier:
        x, y = frontier.popleft()
        if matches[y][x]:
            return x, y

        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height and not visited[ny * width + nx]:
                visited[ny * width + nx] = 1
                frontier.append((nx, ny))

    return None


def find_target_point(grayscale: np.ndarray, rng: np.random.Generator) -> Optional[Pixel]:
    """
    Find a target pixel in a grayscale render.

    Args:
        grayscale: uint8 escape-count raster
        rng: Random generator for the starting pixel

    Returns:
        Target pixel (x, y) on a strong edge, or None
    """
    height, width = grayscale.shape
    if width == 0 or height == 0:
        return None

    regions = blur(grayscale)
    start = (int(rng.integers(0, width)), int(rng.integers(0, height)))

    dark_point = find_point(start, regions, lambda r: r <= DARKNESS_THRESHOLD)
    if dark_point is None:
        logger.debug(f"No dark region reachable from {start}")
        return None

    edged = edges(grayscale)
    target = find_point(dark_point, edged, lambda r: r >= EDGE_THRESHOLD)
    if target is None:
        logger.debug(f"No edge reachable from dark point {dark_point}")
    return target


def select_target(rng: np.random.Generator, fractal: Fractal, camera: Camera,
                  dimensions: Tuple[int, int], workers: Optional[int] = None) -> Optional[Pixel]:
    """Render the current view in grayscale and pick the next target in it."""
    grayscale = produce_image(fractal, camera, dimensions, grayscale_painter, workers)
    return find_target_point(grayscale, rng)
