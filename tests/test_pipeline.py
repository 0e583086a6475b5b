import numpy as np
import pytest

from fractal_dive.acceleration.parallel import ParallelRenderer, create_row_bands
from fractal_dive.core.camera import Camera
from fractal_dive.core.fractal_types import Fractal
from fractal_dive.rendering.coloring import GradientPainter, grayscale_painter
from fractal_dive.rendering.pipeline import produce_image


def test_grayscale_raster_layout(mandelbrot, small_camera):
    image = produce_image(mandelbrot, small_camera, (80, 60), grayscale_painter)
    assert image.shape == (60, 80)
    assert image.dtype == np.uint8


def test_rgb_raster_layout(mandelbrot, small_camera):
    image = produce_image(mandelbrot, small_camera, (80, 60), GradientPainter())
    assert image.shape == (60, 80, 3)
    assert image.dtype == np.uint8


@pytest.mark.parametrize("dimensions", [(0, 0), (0, 10), (10, 0)])
def test_zero_sized_raster_is_empty(mandelbrot, small_camera, dimensions):
    width, height = dimensions
    image = produce_image(mandelbrot, small_camera, dimensions, GradientPainter())
    assert image.shape == (height, width, 3)
    assert image.size == 0


def test_pixels_match_point_evaluation():
    fractal = Fractal.julia(-0.1, 0.2)
    camera = Camera((11.0, 9.0), complex(0.05, -0.1), 0.7)
    image = produce_image(fractal, camera, (11, 9), grayscale_painter)

    for py in range(9):
        for px in range(11):
            point = camera.project(px, py)
            assert image[py, px] == fractal.escape_count(point.real, point.imag)


def test_worker_count_does_not_change_result(mandelbrot):
    camera = Camera((70.0, 130.0), complex(-0.6, 0.0), 0.9)
    single = produce_image(mandelbrot, camera, (70, 130), grayscale_painter, workers=1)
    many = produce_image(mandelbrot, camera, (70, 130), grayscale_painter, workers=4)
    assert np.array_equal(single, many)


def test_row_bands_cover_every_row_once():
    bands = create_row_bands(100, 32)
    assert [(b.y_start, b.y_end) for b in bands] == [(0, 32), (32, 64), (64, 96), (96, 100)]
    assert sum(b.height for b in bands) == 100
    assert create_row_bands(0, 32) == []

    with pytest.raises(ValueError):
        create_row_bands(10, 0)


def test_parallel_renderer_fills_output():
    output = np.zeros((50, 3), dtype=np.int64)
    renderer = ParallelRenderer(num_workers=3, band_height=7)
    renderer.render(lambda band: np.full((band.height, 3), band.band_id), output)

    for row in range(50):
        assert np.all(output[row] == row // 7)


def test_parallel_renderer_propagates_errors():
    def fail(band):
        raise RuntimeError("band failed")

    with pytest.raises(RuntimeError, match="band failed"):
        ParallelRenderer(num_workers=2, band_height=4).render(fail, np.zeros((16, 2)))
