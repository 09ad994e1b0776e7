"""
Luminance Quantizer

Maps normalized intensity x in [0, 1] to a tile palette index
floor(x * (N - 1)), so black lands on the emptiest glyph and white on the
densest one.
"""

import math
from typing import Sequence
import numpy as np

from .filters import check_gray


def quantize_index(x: float, n: int) -> int:
    """
    Palette index for a normalized intensity.

    Args:
        x: Intensity in [0, 1]
        n: Palette size (>= 1)

    Returns:
        Index in [0, n - 1]; x=0 -> 0 and x=1 -> n - 1 exactly
    """
    if n < 1:
        raise ValueError(f"palette size must be >= 1, got {n}")
    if not 0.0 <= x <= 1.0:
        raise ValueError(f"intensity must be in [0, 1], got {x}")
    return min(int(math.floor(x * (n - 1))), n - 1)


def quantize_indices(gray: np.ndarray, n: int) -> np.ndarray:
    """
    Elementwise palette indices for a uint8 buffer.

    Integer arithmetic, (v * (n - 1)) // 255, so pixel 255 never rounds
    past the last glyph.
    """
    if n < 1:
        raise ValueError(f"palette size must be >= 1, got {n}")
    check_gray(gray)
    return (gray.astype(np.int64) * (n - 1)) // 255


def quantize(gray: np.ndarray, tile_palette: Sequence[str]) -> np.ndarray:
    """
    Convert a grayscale buffer into a tile character grid.

    Args:
        gray: (rows, cols) uint8 buffer at cell resolution
        tile_palette: Glyphs ordered emptiest -> densest

    Returns:
        (rows, cols) array of single characters
    """
    palette = np.array(list(tile_palette), dtype='<U1')
    return palette[quantize_indices(gray, len(palette))]
