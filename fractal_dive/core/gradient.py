"""
Piecewise-linear gradients over arbitrary mixable values.

A gradient is a list of ``(position, value)`` stops. Values only need to
support ``a + (b - a) * t``, so the same class interpolates RGB colors
(numpy arrays), complex numbers and arrays of complex numbers.
"""

from bisect import bisect_right
from typing import Any, List, Sequence, Tuple

import numpy as np


class Gradient:
    """Linear interpolation between ordered stops, clamped at both ends."""

    def __init__(self, stops: Sequence[Tuple[float, Any]]):
        """
        Initialize gradient.

        Args:
            stops: (position, value) pairs with non-decreasing positions
        """
        if not stops:
            raise ValueError("Gradient must contain at least one stop")

        self.positions: List[float] = []
        self.values: List[Any] = []

        for position, value in stops:
            position = float(position)
            if self.positions and position < self.positions[-1]:
                raise ValueError("Gradient stop positions must be non-decreasing")
            if isinstance(value, (tuple, list)):
                value = np.asarray(value, dtype=np.float64)
            self.positions.append(position)
            self.values.append(value)

    @classmethod
    def evenly(cls, values: Sequence[Any]) -> 'Gradient':
        """Create a gradient with values spread evenly over [0, 1]."""
        if len(values) == 1:
            return cls([(0.0, values[0])])
        last = len(values) - 1
        return cls([(i / last, value) for i, value in enumerate(values)])

    @property
    def domain(self) -> Tuple[float, float]:
        return self.positions[0], self.positions[-1]

    def get(self, t: float) -> Any:
        """Get the interpolated value at position t."""
        if t <= self.positions[0]:
            return self.values[0]
        if t >= self.positions[-1]:
            return self.values[-1]

        hi = bisect_right(self.positions, t)
        lo = hi - 1
        span = self.positions[hi] - self.positions[lo]
        local_t = (t - self.positions[lo]) / span
        start = self.values[lo]
        end = self.values[hi]
        return start + (end - start) * local_t

    def __len__(self) -> int:
        return len(self.positions)
