"""
Image export with metadata.

Rasters leave the dive engine here: final images and debug snapshots are
encoded with Pillow, PNG files carry the run report as a JSON text chunk.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
from PIL import Image, PngImagePlugin

from .. import __version__

logger = logging.getLogger(__name__)


@dataclass
class RenderMetadata:
    """Metadata for fractal renders."""

    # Fractal parameters
    fractal_type: str
    center: Tuple[float, float]
    zoom: float
    resolution: Tuple[int, int]  # width, height
    antialiasing: int

    # Dive
    zoom_divisions: int = 0
    termination: str = ""
    seed: Optional[int] = None

    # Generation info
    timestamp: str = ""
    software_version: str = __version__

    fractal_parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Set default timestamp if not provided."""
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    @classmethod
    def from_info(cls, info, resolution: Tuple[int, int], antialiasing: int) -> 'RenderMetadata':
        """Create metadata from a :class:`~fractal_dive.api.GenerationInfo`."""
        return cls(
            fractal_type=info.fractal.name,
            center=(info.camera.center.real, info.camera.center.imag),
            zoom=info.camera.zoom,
            resolution=tuple(resolution),
            antialiasing=antialiasing,
            zoom_divisions=info.iterations,
            termination=info.termination.value,
            seed=info.seed,
            fractal_parameters=info.fractal.to_dict(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderMetadata':
        """Create metadata from dictionary."""
        data = dict(data)
        data['center'] = tuple(data['center'])
        data['resolution'] = tuple(data['resolution'])
        return cls(**data)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        """Create metadata from JSON string."""
        return cls.from_dict(json.loads(json_str))


def debug_snapshot_path(directory: Union[str, Path], index: int) -> Path:
    """File name of the debug snapshot taken after dive iteration ``index``."""
    return Path(directory) / f"spotted-area-{index:03d}.png"


class ImageExporter:
    """Raster export with metadata support."""

    def __init__(self):
        """Initialize image exporter."""
        self.supported_formats = {
            '.png': self._save_png,
            '.tiff': self._save_tiff,
            '.tif': self._save_tiff,
            '.jpg': self._save_jpeg,
            '.jpeg': self._save_jpeg,
        }

    def save_image(self, image_array: np.ndarray, filepath: Union[str, Path],
                   metadata: Optional[RenderMetadata] = None, quality: int = 95) -> None:
        """
        Save a raster to file.

        Args:
            image_array: uint8 grayscale (H, W) or RGB (H, W, 3) array
            filepath: Output file path, the suffix selects the format
            metadata: Render metadata to embed
            quality: JPEG quality (1-100)
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()

        if suffix not in self.supported_formats:
            supported = ', '.join(self.supported_formats.keys())
            raise ValueError(f"Unsupported format '{suffix}'. Supported: {supported}")

        pil_image = Image.fromarray(self._prepare_image_array(image_array))

        save_method = self.supported_formats[suffix]
        save_method(pil_image, filepath, metadata, quality)

        logger.info(f"Saved image: {filepath} ({pil_image.size[0]}x{pil_image.size[1]})")

    def _prepare_image_array(self, image_array: np.ndarray) -> np.ndarray:
        """Validate the raster layout and convert it to 8-bit."""
        image_array = np.asarray(image_array)
        is_gray = image_array.ndim == 2
        is_rgb = image_array.ndim == 3 and image_array.shape[2] == 3
        if not (is_gray or is_rgb):
            raise ValueError(f"Expected raster of shape (H, W) or (H, W, 3), got {image_array.shape}")

        if image_array.dtype != np.uint8:
            image_array = np.clip(image_array, 0, 255).astype(np.uint8)
        return image_array

    def _save_png(self, pil_image: Image.Image, filepath: Path,
                  metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as PNG with metadata."""
        pnginfo = PngImagePlugin.PngInfo()

        if metadata:
            pnginfo.add_text("Title", f"Fractal: {metadata.fractal_type}")
            pnginfo.add_text("Software", f"fractal-dive v{metadata.software_version}")
            pnginfo.add_text("Creation Time", metadata.timestamp)
            pnginfo.add_text("FractalMetadata", metadata.to_json())

        pil_image.save(filepath, "PNG", pnginfo=pnginfo)

    def _save_tiff(self, pil_image: Image.Image, filepath: Path,
                   metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as TIFF, metadata goes in the ImageDescription tag."""
        if metadata:
            pil_image.save(filepath, "TIFF", compression='tiff_lzw', description=metadata.to_json())
        else:
            pil_image.save(filepath, "TIFF", compression='tiff_lzw')

    def _save_jpeg(self, pil_image: Image.Image, filepath: Path,
                   metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as JPEG, metadata goes in a companion JSON file."""
        pil_image.save(filepath, "JPEG", quality=quality, optimize=True)

        if metadata:
            with open(filepath.with_suffix('.json'), 'w') as f:
                f.write(metadata.to_json())

    def extract_metadata_from_image(self, filepath: Union[str, Path]) -> Optional[RenderMetadata]:
        """
        Extract fractal metadata from a saved PNG.

        Returns:
            Extracted metadata or None
        """
        with Image.open(filepath) as img:
            text = getattr(img, 'text', {})
            if 'FractalMetadata' in text:
                return RenderMetadata.from_json(text['FractalMetadata'])
        return None
