"""
Raster filters: blur, edge detection and downsampling.
"""

import logging
from typing import Tuple

import numpy as np
from PIL import Image
from scipy.ndimage import convolve, gaussian_filter

logger = logging.getLogger(__name__)

BLUR_RADIUS = 10.0

# 3x3 Laplacian, responds to luminance changes in every direction
EDGE_KERNEL = np.array([
    [-1, -1, -1],
    [-1, 8, -1],
    [-1, -1, -1],
], dtype=np.int32)


def blur(raster: np.ndarray, sigma: float = BLUR_RADIUS) -> np.ndarray:
    """Gaussian blur of a grayscale raster."""
    blurred = gaussian_filter(raster.astype(np.float64), sigma=sigma, mode='nearest')
    return np.clip(np.rint(blurred), 0, 255).astype(np.uint8)


def edges(raster: np.ndarray) -> np.ndarray:
    """
    Edge intensity of a grayscale raster.

    Args:
        raster: uint8 grayscale array

    Returns:
        uint8 array, Laplacian response clamped to [0, 255]
    """
    response = convolve(raster.astype(np.int32), EDGE_KERNEL, mode='nearest')
    return np.clip(response, 0, 255).astype(np.uint8)


def downsample(raster: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
    """
    Shrink a raster with a triangle filter.

    Pillow widens the filter support by the scale factor when shrinking, so
    every source pixel contributes to the result.

    Args:
        raster: uint8 grayscale or RGB array
        size: Target (width, height)

    Returns:
        Resized uint8 array
    """
    pil_image = Image.fromarray(raster)
    resized = pil_image.resize(size, Image.Resampling.BILINEAR)
    logger.debug(f"Downsampled {pil_image.size} to {resized.size}")
    return np.asarray(resized)
