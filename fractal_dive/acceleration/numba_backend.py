"""
Numba JIT compilation backend for escape-time computation.

The kernels here are compiled with ``nogil=True`` so that the row-band
worker threads of :mod:`fractal_dive.acceleration.parallel` run them
concurrently. Every kernel shares the same scalar iteration,
:func:`escape_time`, which is also what single-point evaluation calls.
"""

import logging

import numba
import numpy as np
from numba import jit

logger = logging.getLogger(__name__)
logger.debug(f"Numba available: {numba.__version__}")

# |z| >= 2 is tested as |z|^2 >= 4, boundary counts as escaped
ESCAPE_RADIUS_SQ = 4.0


@jit(nopython=True, nogil=True, cache=True)
def escape_time(zr, zi, cr, ci, max_iter):
    """
    Count iterations of z = z^2 + c until z escapes or max_iter is reached.

    Args:
        zr, zi: Initial value of z
        cr, ci: The constant c
        max_iter: Iteration cap

    Returns:
        Number of iterations performed
    """
    n = 0
    while n < max_iter:
        zr_sq = zr * zr
        zi_sq = zi * zi

        if zr_sq + zi_sq >= ESCAPE_RADIUS_SQ:
            break

        zi = 2.0 * zr * zi + ci
        zr = zr_sq - zi_sq + cr
        n += 1

    return n


@jit(nopython=True, nogil=True, cache=True)
def mandelbrot_kernel(c_real, c_imag, max_iter):
    """
    JIT-compiled Mandelbrot kernel.

    Args:
        c_real: Real components of c values
        c_imag: Imaginary components of c values
        max_iter: Maximum iterations (at most 255)

    Returns:
        uint8 array of escape counts
    """
    height, width = c_real.shape
    counts = np.empty((height, width), dtype=np.uint8)

    for i in range(height):
        for j in range(width):
            counts[i, j] = escape_time(0.0, 0.0, c_real[i, j], c_imag[i, j], max_iter)

    return counts


@jit(nopython=True, nogil=True, cache=True)
def julia_kernel(z_real, z_imag, c_real, c_imag, max_iter):
    """
    JIT-compiled Julia set kernel.

    Args:
        z_real: Real components of initial z values
        z_imag: Imaginary components of initial z values
        c_real: Real component of Julia constant
        c_imag: Imaginary component of Julia constant
        max_iter: Maximum iterations (at most 255)

    Returns:
        uint8 array of escape counts
    """
    height, width = z_real.shape
    counts = np.empty((height, width), dtype=np.uint8)

    for i in range(height):
        for j in range(width):
            counts[i, j] = escape_time(z_real[i, j], z_imag[i, j], c_real, c_imag, max_iter)

    return counts
