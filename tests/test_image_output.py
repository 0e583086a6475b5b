import numpy as np
import pytest
from PIL import Image

from fractal_dive.rendering.image_output import ImageExporter, RenderMetadata, debug_snapshot_path


@pytest.fixture
def metadata():
    return RenderMetadata(
        fractal_type="Mandelbrot",
        center=(-0.75, 0.1),
        zoom=0.125,
        resolution=(16, 8),
        antialiasing=4,
        zoom_divisions=3,
        termination="budget exhausted",
        seed=42,
        fractal_parameters={'type': 'mandelbrot'},
    )


def test_save_rgb_png_with_metadata(tmp_path, metadata):
    path = tmp_path / "image.png"
    raster = np.zeros((8, 16, 3), dtype=np.uint8)
    raster[:, :, 2] = 200

    exporter = ImageExporter()
    exporter.save_image(raster, path, metadata)

    with Image.open(path) as img:
        assert img.size == (16, 8)
        assert img.mode == 'RGB'
    assert exporter.extract_metadata_from_image(path) == metadata


def test_save_grayscale_png(tmp_path):
    path = tmp_path / "gray.png"
    ImageExporter().save_image(np.full((5, 7), 128, dtype=np.uint8), path)

    with Image.open(path) as img:
        assert img.mode == 'L'
        assert img.size == (7, 5)
    assert ImageExporter().extract_metadata_from_image(path) is None


def test_save_jpeg_writes_companion_json(tmp_path, metadata):
    path = tmp_path / "image.jpg"
    ImageExporter().save_image(np.zeros((8, 16, 3), dtype=np.uint8), path, metadata)
    assert path.exists()
    assert RenderMetadata.from_json(path.with_suffix('.json').read_text()) == metadata


def test_save_tiff_with_description(tmp_path, metadata):
    path = tmp_path / "image.tiff"
    raster = np.zeros((8, 16, 3), dtype=np.uint8)
    raster[2:6, 4:12] = (255, 128, 0)

    ImageExporter().save_image(raster, path, metadata)

    with Image.open(path) as img:
        assert img.size == (16, 8)
        assert np.array_equal(np.asarray(img.convert("RGB")), raster)
        description = img.tag_v2.get(270)
    assert RenderMetadata.from_json(description) == metadata


def test_rejects_bad_input(tmp_path):
    exporter = ImageExporter()
    with pytest.raises(ValueError, match="Unsupported format"):
        exporter.save_image(np.zeros((2, 2), dtype=np.uint8), tmp_path / "image.bmp")
    with pytest.raises(ValueError, match="Expected raster"):
        exporter.save_image(np.zeros((2, 2, 4), dtype=np.uint8), tmp_path / "image.png")


def test_debug_snapshot_path(tmp_path):
    assert debug_snapshot_path(tmp_path, 7).name == "spotted-area-007.png"
    assert debug_snapshot_path(tmp_path, 123).parent == tmp_path
