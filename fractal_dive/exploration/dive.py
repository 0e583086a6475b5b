"""
The dive loop.

A dive is a small state machine. While active with a positive budget, each
step picks a target in the current view, halves the view width around it
and spends one unit of budget. It terminates when the budget runs out or
when no target can be found.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

import numpy as np

from ..core.camera import Camera
from ..core.fractal_types import Fractal
from ..rendering.coloring import grayscale_painter
from ..rendering.filters import edges
from ..rendering.pipeline import produce_image
from .selector import Pixel, select_target

logger = logging.getLogger(__name__)

ZOOM_RATE = 0.5

SnapshotSink = Callable[[int, np.ndarray], None]


class Termination(Enum):
    """Why a dive stopped."""

    BUDGET_EXHAUSTED = 'budget exhausted'
    NO_TARGET = 'no target'


@dataclass
class DiveResult:
    """Final state of a dive."""
    camera: Camera
    iterations: int
    termination: Termination
    targets: List[Pixel] = field(default_factory=list)


def render_debug_snapshot(fractal: Fractal, camera: Camera, dimensions: Tuple[int, int],
                          workers: Optional[int] = None) -> np.ndarray:
    """Edge image of the current view, as used by the selector."""
    return edges(produce_image(fractal, camera, dimensions, grayscale_painter, workers))


class DiveLoop:
    """Zoom a camera toward selected targets until the budget is spent."""

    def __init__(self, fractal: Fractal, camera: Camera, dimensions: Tuple[int, int],
                 budget: int, rng: np.random.Generator,
                 snapshot_sink: Optional[SnapshotSink] = None,
                 zoom_rate: float = ZOOM_RATE, workers: Optional[int] = None):
        """
        Initialize the dive.

        Args:
            fractal: Fractal to dive into
            camera: Camera, mutated in place by every step
            dimensions: Render (width, height) used for target selection
            budget: Maximum number of zoom steps
            rng: Random generator, the only source of randomness
            snapshot_sink: Receives (iteration index, edge raster) after each zoom
            zoom_rate: Zoom multiplier applied per step
            workers: Worker threads for rendering
        """
        self.fractal = fractal
        self.camera = camera
        self.dimensions = dimensions
        self.budget = budget
        self.rng = rng
        self.snapshot_sink = snapshot_sink
        self.zoom_rate = zoom_rate
        self.workers = workers

        self.iterations = 0
        self.targets: List[Pixel] = []
        self.termination: Optional[Termination] = None

    @property
    def active(self) -> bool:
        return self.termination is None

    def _terminate(self, reason: Termination) -> None:
        self.termination = reason
        logger.info(f"Dive terminated after {self.iterations} iterations: {reason.value}")

    def step(self) -> Optional[Pixel]:
        """
        Perform one transition of the dive.

        Returns:
            The pixel zoomed toward, or None if the dive terminated
        """
        if not self.active:
            raise RuntimeError(f"Dive already terminated: {self.termination.value}")

        if self.budget <= 0:
            self._terminate(Termination.BUDGET_EXHAUSTED)
            return None

        target = select_target(self.rng, self.fractal, self.camera, self.dimensions, self.workers)
        if target is None:
            self._terminate(Termination.NO_TARGET)
            return None

        new_zoom = self.camera.zoom * self.zoom_rate
        if not math.isfinite(new_zoom) or new_zoom <= 0.0:
            logger.warning(f"Degenerate zoom {new_zoom!r} after {self.iterations} iterations")
            self._terminate(Termination.NO_TARGET)
            return None

        self.camera.zoom_to(target, new_zoom)
        self.targets.append(target)
        logger.info(f"Dive {self.iterations}: target {target}, center {self.camera.center}, "
                    f"zoom {self.camera.zoom:e}")

        if self.snapshot_sink is not None:
            snapshot = render_debug_snapshot(self.fractal, self.camera, self.dimensions, self.workers)
            self.snapshot_sink(self.iterations, snapshot)

        self.iterations += 1
        self.budget -= 1
        if self.budget == 0:
            self._terminate(Termination.BUDGET_EXHAUSTED)

        return target

    def run(self) -> DiveResult:
        """Step until terminated."""
        while self.active:
            self.step()
        return DiveResult(self.camera, self.iterations, self.termination, list(self.targets))


def dive(fractal: Fractal, camera: Camera, dimensions: Tuple[int, int], budget: int,
         rng: np.random.Generator, snapshot_sink: Optional[SnapshotSink] = None,
         workers: Optional[int] = None) -> DiveResult:
    """Run a complete dive, see :class:`DiveLoop`."""
    return DiveLoop(fractal, camera, dimensions, budget, rng,
                    snapshot_sink=snapshot_sink, workers=workers).run()
