import numpy as np
import pytest

from fractal_dive.core.camera import Camera
from fractal_dive.core.fractal_types import Fractal


@pytest.fixture
def rng():
    """Deterministic random generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def mandelbrot():
    return Fractal.mandelbrot()


@pytest.fixture
def small_camera():
    """Camera over the default view of an 80x60 screen."""
    return Camera((80.0, 60.0))
