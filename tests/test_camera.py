import numpy as np
import pytest

from fractal_dive.core.camera import VIEW_SPAN, Camera


@pytest.mark.parametrize("zoom", [1.0, 0.5, 3.7, 1e-12])
def test_screen_center_projects_to_center(zoom):
    camera = Camera((800.0, 600.0), complex(-0.74, 0.12), zoom)
    assert camera.project(400.0, 300.0) == complex(-0.74, 0.12)


def test_default_view_spans_shorter_side():
    camera = Camera((800.0, 600.0))
    top = camera.project(400.0, 0.0)
    bottom = camera.project(400.0, 600.0)
    assert bottom.imag - top.imag == pytest.approx(VIEW_SPAN)

    # Square pixels
    left = camera.project(0.0, 300.0)
    right = camera.project(800.0, 300.0)
    assert right.real - left.real == pytest.approx(VIEW_SPAN * 800 / 600)


def test_zoom_to_centers_on_target():
    camera = Camera((100.0, 80.0), complex(0.25, -0.1), 1.0)
    target = (70, 12)
    before = camera.project(*target)

    camera.zoom_to(target, 0.5)

    assert camera.zoom == 0.5
    assert camera.center == before
    assert camera.project(50.0, 40.0) == before


def test_repeated_zoom_is_multiplicative():
    camera = Camera((64.0, 64.0))
    for _ in range(40):
        camera.zoom_to((40, 20), camera.zoom * 0.5)
    assert camera.zoom == 0.5 ** 40
    assert np.isfinite(camera.center.real) and np.isfinite(camera.center.imag)


def test_projection_is_resolution_independent():
    camera = Camera((100.0, 80.0), complex(-1.0, 0.3), 0.25)
    big = camera.with_screen_size((400, 320))

    for px, py in [(0, 0), (25, 10), (99, 79), (50, 40)]:
        assert big.project(px * 4, py * 4) == pytest.approx(camera.project(px, py))


def test_project_grid_matches_project():
    camera = Camera((12.0, 10.0), complex(0.1, 0.2), 0.3)
    real, imag = camera.project_grid(2, 8, 3, 6)

    assert real.shape == (3, 6)
    for row, py in enumerate(range(3, 6)):
        for col, px in enumerate(range(2, 8)):
            assert complex(real[row, col], imag[row, col]) == camera.project(px, py)


def test_copy_is_independent():
    camera = Camera((10.0, 10.0))
    clone = camera.copy()
    clone.zoom_to((2, 3), 0.5)
    assert camera.zoom == 1.0
    assert camera.center == 0j
