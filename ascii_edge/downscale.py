"""
Edge Downscaler

Reduces the per-pixel edge-class buffer to one class per output cell:

1. Take the tile_size x tile_size block behind the cell.
2. Count classes scanning the block row-major. The mode is the class whose
   count first reaches the maximum during the scan.
3. density = distinct classes in the block / tile_size**2
4. The cell gets the mode if density >= threshold, otherwise NONE.

The gate counts distinct classes, not edge pixels: a busy block with many
directions passes even if most of its pixels are NONE, while a large block
dominated by one class can fail. At most five classes exist, so with
threshold 1 any block bigger than 5 pixels is always gated off.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import numpy as np

from .charsets import EDGE_CLASS_COUNT
from .edges import NONE
from .errors import ArrayShapeMismatchError, ProcessingError
from .parallel import map_row_bands


logger = logging.getLogger(__name__)


def _block_view(classes: np.ndarray, start: int, stop: int, cols: int, tile_size: int) -> np.ndarray:
    """(stop - start, cols, tile_size**2) blocks, each flattened row-major."""
    band = classes[start * tile_size:stop * tile_size, :cols * tile_size]
    band = band.reshape(stop - start, tile_size, cols, tile_size).transpose(0, 2, 1, 3)
    return band.reshape(stop - start, cols, tile_size * tile_size)


def _vote(blocks: np.ndarray, threshold: float) -> np.ndarray:
    n = blocks.shape[-1]
    one_hot = blocks[..., None] == np.arange(EDGE_CLASS_COUNT, dtype=blocks.dtype)
    # running[..., k, c]: occurrences of class c within the first k+1 pixels
    running = np.cumsum(one_hot, axis=2, dtype=np.int32)
    counts = running[:, :, -1, :]
    max_count = counts.max(axis=-1)

    reached = running == max_count[:, :, None, None]
    first_reach = np.where(reached.any(axis=2), reached.argmax(axis=2), n)
    mode = first_reach.argmin(axis=-1)

    distinct = (counts > 0).sum(axis=-1)
    passed = distinct / float(n) >= threshold
    return np.where(passed, mode, NONE).astype(np.uint8)


def hist_downscale(
    classes: np.ndarray,
    tile_size: int,
    threshold: float,
    shape: Tuple[int, int],
    workers: Optional[int] = None,
) -> np.ndarray:
    """
    Downscale an edge-class buffer by histogram majority vote.

    Args:
        classes: (H, W) uint8 edge classes at full resolution
        tile_size: Pixels per cell edge
        threshold: Density gate in [0, 1]
        shape: Output (rows, cols)
        workers: Threads for the row bands (None = default, 1 = inline)

    Returns:
        (rows, cols) uint8 edge classes

    Raises:
        ValueError: tile_size < 1 or threshold outside [0, 1]
        ArrayShapeMismatchError: classes too small for shape * tile_size
        ProcessingError: values outside the five edge classes
    """
    if tile_size < 1:
        raise ValueError(f"tile_size must be >= 1, got {tile_size}")
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be in [0, 1], got {threshold}")

    classes = np.asarray(classes)
    rows, cols = shape
    if classes.ndim != 2:
        raise ArrayShapeMismatchError(f"expected 2-D edge buffer, got shape {classes.shape}")
    if rows < 0 or cols < 0 or classes.shape[0] < rows * tile_size or classes.shape[1] < cols * tile_size:
        raise ArrayShapeMismatchError(
            f"edge buffer {classes.shape} can't cover {rows}x{cols} cells of {tile_size}px"
        )
    if classes.size and (int(classes.min()) < 0 or int(classes.max()) >= EDGE_CLASS_COUNT):
        raise ProcessingError(
            f"edge classes must be in 0-{EDGE_CLASS_COUNT - 1}, got {int(classes.min())}..{int(classes.max())}"
        )

    classes = classes.astype(np.uint8, copy=False)
    out = np.zeros((rows, cols), dtype=np.uint8)
    if rows == 0 or cols == 0:
        return out

    def run_band(start: int, stop: int) -> np.ndarray:
        return _vote(_block_view(classes, start, stop, cols, tile_size), threshold)

    for start, band in map_row_bands(run_band, rows, workers=workers):
        out[start:start + band.shape[0]] = band

    logger.debug("downscaled %s -> %s, %d edge cells", classes.shape, out.shape, int((out != NONE).sum()))
    return out


@dataclass
class EdgeDownscaler:
    """hist_downscale bound to a cell size and density gate."""
    tile_size: int = 4
    threshold: float = 0.0
    workers: Optional[int] = None

    def apply(self, classes: np.ndarray, shape: Tuple[int, int]) -> np.ndarray:
        return hist_downscale(classes, self.tile_size, self.threshold, shape, self.workers)
