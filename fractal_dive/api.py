"""
Main API for generating a fractal image by diving.

:class:`Generator` owns the random generator of a run: it picks the
fractal, draws the dive budget, runs the dive and composes the final image.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .config import DiveConfig, seed_from_datetime
from .core.camera import Camera
from .core.fractal_types import Fractal, FractalKind, pick_julia_delta
from .exploration.dive import DiveLoop, SnapshotSink, Termination
from .rendering.compositor import DEFAULT_SUPERSAMPLING, compose

logger = logging.getLogger(__name__)

# Budget ranges, upper bound exclusive
MANDELBROT_BUDGET = (3, 40)
JULIA_BUDGET = (1, 20)


@dataclass
class GenerationInfo:
    """Report of a generation run."""
    fractal: Fractal
    budget: int
    iterations: int
    termination: Termination
    camera: Camera
    seed: Optional[int] = None

    def __str__(self) -> str:
        return (f"{self.fractal.get_description()}, "
                f"{self.iterations}/{self.budget} zoom divisions ({self.termination.value}), "
                f"center ({self.camera.center.real}, {self.camera.center.imag}), "
                f"zoom {self.camera.zoom:e}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'fractal': self.fractal.to_dict(),
            'budget': self.budget,
            'iterations': self.iterations,
            'termination': self.termination.value,
            'center': [self.camera.center.real, self.camera.center.imag],
            'zoom': self.camera.zoom,
            'seed': self.seed,
        }


class Generator:
    """Seeded end-to-end fractal dive."""

    def __init__(self, rng: np.random.Generator,
                 dive_dimensions: Tuple[int, int] = (800, 600),
                 shot_dimensions: Tuple[int, int] = (800, 600),
                 antialiasing: int = DEFAULT_SUPERSAMPLING,
                 snapshot_sink: Optional[SnapshotSink] = None,
                 workers: Optional[int] = None,
                 seed: Optional[int] = None):
        """
        Initialize generator.

        Args:
            rng: Random generator, consumed only by this generator
            dive_dimensions: Resolution used while diving
            shot_dimensions: Resolution of the final image
            antialiasing: Per-axis supersampling factor of the final image
            snapshot_sink: Receives debug snapshots, None disables them
            workers: Worker threads for rendering
            seed: Seed the generator was built from, reported only
        """
        self.rng = rng
        self.dive_dimensions = dive_dimensions
        self.shot_dimensions = shot_dimensions
        self.antialiasing = antialiasing
        self.snapshot_sink = snapshot_sink
        self.workers = workers
        self.seed = seed

    @classmethod
    def from_seed(cls, seed: int, **kwargs) -> 'Generator':
        return cls(np.random.default_rng(seed), seed=seed, **kwargs)

    @classmethod
    def from_date(cls, moment: datetime, **kwargs) -> 'Generator':
        """Create a generator seeded by a (floored) datetime."""
        return cls.from_seed(seed_from_datetime(moment), **kwargs)

    @classmethod
    def from_config(cls, config: DiveConfig,
                    snapshot_sink: Optional[SnapshotSink] = None) -> 'Generator':
        """Create a generator from a validated configuration."""
        return cls.from_date(
            config.resolve_date_seed(),
            dive_dimensions=tuple(config.dive_dimensions),
            shot_dimensions=tuple(config.shot_dimensions),
            antialiasing=config.antialiasing,
            snapshot_sink=snapshot_sink if config.debug_images else None,
            workers=config.workers,
        )

    def choose_fractal(self) -> Tuple[Fractal, int]:
        """
        Pick the fractal variant and draw its dive budget.

        Returns:
            (fractal, budget) tuple
        """
        kind = FractalKind.MANDELBROT if self.rng.random() < 0.5 else FractalKind.JULIA

        if kind is FractalKind.MANDELBROT:
            fractal = Fractal.mandelbrot()
            budget = int(self.rng.integers(*MANDELBROT_BUDGET))
        else:
            delta = pick_julia_delta(self.rng)
            fractal = Fractal.julia(delta.real, delta.imag)
            budget = int(self.rng.integers(*JULIA_BUDGET))

        logger.info(f"{fractal.get_description()}, zoom divisions {budget}")
        return fractal, budget

    def generate(self) -> Tuple[GenerationInfo, np.ndarray]:
        """
        Dive into a fractal and render the final image.

        Returns:
            (report, RGB raster of shot_dimensions)
        """
        start_time = time.time()
        fractal, budget = self.choose_fractal()

        width, height = self.dive_dimensions
        camera = Camera((float(width), float(height)))
        loop = DiveLoop(fractal, camera, self.dive_dimensions, budget, self.rng,
                        snapshot_sink=self.snapshot_sink, workers=self.workers)
        result = loop.run()

        image = compose(fractal, result.camera, self.shot_dimensions,
                        self.antialiasing, workers=self.workers)

        info = GenerationInfo(fractal, budget, result.iterations, result.termination,
                              result.camera, self.seed)
        logger.info(f"Generation complete: {time.time() - start_time:.2f}s")
        return info, image
