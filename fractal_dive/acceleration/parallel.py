"""
Row-band parallel rendering.

The raster is split into horizontal bands. Each band is computed by one
task and written into its own slice of a pre-allocated output array, so
workers never share mutable state. The numba kernels release the GIL,
which lets a thread pool keep every core busy.
"""

import logging
import multiprocessing as mp
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_BAND_HEIGHT = 32


@dataclass
class RowBand:
    """A horizontal band of rows in a raster."""
    band_id: int
    y_start: int
    y_end: int

    @property
    def height(self) -> int:
        return self.y_end - self.y_start


def create_row_bands(height: int, band_height: int = DEFAULT_BAND_HEIGHT) -> List[RowBand]:
    """
    Split ``height`` rows into bands of at most ``band_height`` rows.

    Args:
        height: Total image height
        band_height: Target band height (rows)

    Returns:
        List of RowBand objects covering every row exactly once
    """
    if band_height <= 0:
        raise ValueError("band_height must be positive")

    bands = []
    for band_id, y in enumerate(range(0, height, band_height)):
        bands.append(RowBand(band_id=band_id, y_start=y, y_end=min(y + band_height, height)))
    return bands


def get_optimal_worker_count() -> int:
    """Get the number of workers for band rendering."""
    return max(1, mp.cpu_count())


class ParallelRenderer:
    """Fill a raster band by band with a pool of worker threads."""

    def __init__(self, num_workers: Optional[int] = None, band_height: int = DEFAULT_BAND_HEIGHT):
        """
        Initialize parallel renderer.

        Args:
            num_workers: Number of worker threads (None for CPU count)
            band_height: Rows per band
        """
        if num_workers is None:
            self.num_workers = get_optimal_worker_count()
        else:
            self.num_workers = max(1, num_workers)
        self.band_height = band_height

    def render(self, compute_band: Callable[[RowBand], np.ndarray], output: np.ndarray) -> np.ndarray:
        """
        Compute every band of ``output`` and store it in place.

        Args:
            compute_band: Function returning the pixels of one band
            output: Pre-allocated array whose first axis is the row axis

        Returns:
            The filled ``output`` array
        """
        start_time = time.time()
        bands = create_row_bands(output.shape[0], self.band_height)

        def fill(band: RowBand) -> None:
            output[band.y_start:band.y_end] = compute_band(band)

        if self.num_workers == 1 or len(bands) <= 1:
            for band in bands:
                fill(band)
        else:
            with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
                futures = [executor.submit(fill, band) for band in bands]
                for future in as_completed(futures):
                    future.result()

        logger.debug(f"Rendered {len(bands)} bands with {self.num_workers} workers "
                     f"in {time.time() - start_time:.3f}s")
        return output
