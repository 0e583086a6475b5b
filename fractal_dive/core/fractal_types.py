"""
Fractal type definitions.

The set of fractals is closed: a :class:`Fractal` is a tagged value whose
``kind`` selects the Mandelbrot or the Julia iteration, and both evaluation
entry points dispatch on that tag in one place.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

import numpy as np

from ..acceleration.numba_backend import escape_time, julia_kernel, mandelbrot_kernel
from ..config import ConfigurationError
from .gradient import Gradient

logger = logging.getLogger(__name__)

# Escape counts fit in a byte
MAX_ITERATIONS = 255

JULIA_OFFSET = complex(0.3, 0.5)

# Pairs of Julia parameter deltas, each pair spans one sub-gradient
JULIA_SUB_GRADIENTS = (
    (complex(-0.8, 0.4), complex(-0.8, 0.0)),
    (complex(-0.6, 0.8), complex(-0.6, 0.6)),
    (complex(-0.4, 0.8), complex(-0.4, 0.6)),
    (complex(-0.2, 1.0), complex(-0.2, 0.8)),
    (complex(0.0, 1.0), complex(0.0, 0.8)),
    (complex(0.19, 0.8), complex(0.19, 0.6)),
    (complex(0.49, 0.6), complex(0.49, 0.2)),
)


class FractalKind(Enum):
    """Supported escape-time fractal variants."""

    MANDELBROT = 'mandelbrot'
    JULIA = 'julia'


@dataclass(frozen=True)
class Fractal:
    """An escape-time fractal, Mandelbrot or Julia with a fixed constant."""

    kind: FractalKind
    c: complex = 0j

    @classmethod
    def mandelbrot(cls) -> 'Fractal':
        return cls(FractalKind.MANDELBROT)

    @classmethod
    def julia(cls, dx: float = 0.0, dy: float = 0.0) -> 'Fractal':
        """
        Create a Julia fractal.

        Args:
            dx, dy: Delta added to the family offset (0.3, 0.5)
        """
        return cls(FractalKind.JULIA, JULIA_OFFSET + complex(dx, dy))

    @property
    def name(self) -> str:
        return self.kind.value.capitalize()

    def escape_count(self, x: float, y: float) -> int:
        """
        Count iterations before the point (x, y) escapes.

        Args:
            x, y: Point in complex plane coordinates

        Returns:
            Iteration count in [0, MAX_ITERATIONS]
        """
        if self.kind is FractalKind.MANDELBROT:
            return escape_time(0.0, 0.0, float(x), float(y), MAX_ITERATIONS)
        return escape_time(float(x), float(y), self.c.real, self.c.imag, MAX_ITERATIONS)

    def escape_counts(self, real: np.ndarray, imag: np.ndarray) -> np.ndarray:
        """
        Vectorized :meth:`escape_count` over 2D coordinate arrays.

        Returns:
            uint8 array with the shape of ``real``
        """
        real = np.ascontiguousarray(real, dtype=np.float64)
        imag = np.ascontiguousarray(imag, dtype=np.float64)

        if self.kind is FractalKind.MANDELBROT:
            return mandelbrot_kernel(real, imag, MAX_ITERATIONS)
        return julia_kernel(real, imag, self.c.real, self.c.imag, MAX_ITERATIONS)

    def get_description(self) -> str:
        if self.kind is FractalKind.MANDELBROT:
            return "Mandelbrot"
        return f"Julia ({self.c.real}, {self.c.imag})"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'type': self.kind.value}
        if self.kind is FractalKind.JULIA:
            data['c_real'] = self.c.real
            data['c_imag'] = self.c.imag
        return data


def create_fractal(name: str, dx: float = 0.0, dy: float = 0.0) -> Fractal:
    """
    Create a fractal by name.

    Args:
        name: 'mandelbrot' or 'julia'
        dx, dy: Julia delta, ignored for Mandelbrot

    Returns:
        Configured fractal instance
    """
    try:
        kind = FractalKind(name.lower())
    except ValueError:
        available = ', '.join(k.value for k in FractalKind)
        raise ConfigurationError(f"Unknown fractal type '{name}'. Available: {available}") from None

    if kind is FractalKind.MANDELBROT:
        return Fractal.mandelbrot()
    return Fractal.julia(dx, dy)


def pick_julia_delta(rng: np.random.Generator) -> complex:
    """
    Pick a Julia delta from the JULIA_SUB_GRADIENTS ranges.

    A first draw blends neighbouring pairs of JULIA_SUB_GRADIENTS, a second
    draw picks a point between the two ends of the blended pair.
    """
    sub_gradients = Gradient.evenly([np.array(pair) for pair in JULIA_SUB_GRADIENTS])
    start, end = sub_gradients.get(rng.random())
    delta = complex(Gradient.evenly([start, end]).get(rng.random()))
    logger.debug(f"Picked Julia delta {delta}")
    return delta
