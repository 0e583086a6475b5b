import numpy as np
import pytest

from fractal_dive.core.camera import Camera
from fractal_dive.core.fractal_types import Fractal
from fractal_dive.exploration import dive as dive_module
from fractal_dive.exploration.dive import DiveLoop, Termination, ZOOM_RATE, dive


def test_dive_with_budget_of_five(mandelbrot):
    camera = Camera((100.0, 100.0))
    initial_zoom = camera.zoom
    rng = np.random.default_rng(0xC0FFEE)

    result = dive(mandelbrot, camera, (100, 100), 5, rng)

    assert result.iterations <= 5
    assert len(result.targets) == result.iterations
    assert result.camera.zoom == initial_zoom * ZOOM_RATE ** result.iterations
    if result.iterations == 5:
        assert result.termination is Termination.BUDGET_EXHAUSTED
    else:
        assert result.termination is Termination.NO_TARGET


def test_zero_budget_terminates_without_rendering(mandelbrot, monkeypatch):
    def unexpected(*args, **kwargs):
        raise AssertionError("no selection expected")

    monkeypatch.setattr(dive_module, 'select_target', unexpected)
    camera = Camera((50.0, 50.0))
    result = dive(mandelbrot, camera, (50, 50), 0, np.random.default_rng(1))

    assert result.termination is Termination.BUDGET_EXHAUSTED
    assert result.iterations == 0
    assert camera.zoom == 1.0 and camera.center == 0j


def test_no_target_is_reported_distinctly(mandelbrot, monkeypatch):
    monkeypatch.setattr(dive_module, 'select_target', lambda *args: None)
    result = dive(mandelbrot, Camera((50.0, 50.0)), (50, 50), 10, np.random.default_rng(1))

    assert result.termination is Termination.NO_TARGET
    assert result.iterations == 0


def test_budget_exhaustion_with_stub_selector(mandelbrot, monkeypatch):
    monkeypatch.setattr(dive_module, 'select_target', lambda *args: (10, 20))
    camera = Camera((50.0, 50.0))
    result = dive(mandelbrot, camera, (50, 50), 3, np.random.default_rng(1))

    assert result.termination is Termination.BUDGET_EXHAUSTED
    assert result.iterations == 3
    assert result.targets == [(10, 20)] * 3
    assert camera.zoom == 0.125


def test_degenerate_zoom_stops_the_dive(mandelbrot, monkeypatch):
    monkeypatch.setattr(dive_module, 'select_target', lambda *args: (1, 1))
    camera = Camera((50.0, 50.0), complex(0.3, 0.2), 5e-324)
    result = dive(mandelbrot, camera, (50, 50), 4, np.random.default_rng(1))

    assert result.termination is Termination.NO_TARGET
    assert result.iterations == 0
    assert camera.zoom == 5e-324
    assert camera.center == complex(0.3, 0.2)


def test_snapshots_are_tagged_with_iteration_index(mandelbrot):
    snapshots = []
    loop = DiveLoop(mandelbrot, Camera((60.0, 40.0)), (60, 40), 3, np.random.default_rng(3),
                    snapshot_sink=lambda index, raster: snapshots.append((index, raster)))
    result = loop.run()

    assert [index for index, _ in snapshots] == list(range(result.iterations))
    for _, raster in snapshots:
        assert raster.shape == (40, 60)
        assert raster.dtype == np.uint8


def test_step_after_termination_raises(mandelbrot):
    loop = DiveLoop(mandelbrot, Camera((20.0, 20.0)), (20, 20), 0, np.random.default_rng(0))
    assert loop.step() is None
    assert not loop.active

    with pytest.raises(RuntimeError, match="already terminated"):
        loop.step()


def test_same_seed_same_trajectory():
    fractal = Fractal.julia(-0.4, 0.3)
    first = dive(fractal, Camera((64.0, 48.0)), (64, 48), 6, np.random.default_rng(99))
    second = dive(fractal, Camera((64.0, 48.0)), (64, 48), 6, np.random.default_rng(99))

    assert first.targets == second.targets
    assert first.camera == second.camera
    assert first.termination is second.termination
