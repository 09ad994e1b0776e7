"""Merge the tile grid and the downscaled edge grid; edges win when present."""

from typing import Sequence
import numpy as np

from .edges import NONE
from .errors import ArrayShapeMismatchError


def compose(tile_grid: np.ndarray, edge_grid: np.ndarray, edge_palette: Sequence[str]) -> np.ndarray:
    """
    Build the final character grid.

    Args:
        tile_grid: (rows, cols) luminance glyphs
        edge_grid: (rows, cols) edge classes, 0 = none
        edge_palette: Five edge glyphs indexed by class

    Returns:
        (rows, cols) character grid
    """
    tile_grid = np.asarray(tile_grid)
    edge_grid = np.asarray(edge_grid)
    if tile_grid.shape != edge_grid.shape:
        raise ArrayShapeMismatchError(
            f"tile grid {tile_grid.shape} and edge grid {edge_grid.shape} differ"
        )

    palette = np.array(list(edge_palette), dtype='<U1')
    edge_chars = palette[edge_grid.astype(np.intp)]
    return np.where(edge_grid == NONE, tile_grid, edge_chars).astype('<U1')
