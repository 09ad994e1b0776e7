"""
Buffer Conversion Utilities

Moves pixel data between PIL images, flat byte buffers and 2-D numpy
arrays. Every pipeline stage works on a (rows, cols) uint8 array and
returns a fresh one, so these helpers always copy.
"""

from typing import Sequence, Tuple, Union
import numpy as np
from PIL import Image

from .errors import ArrayShapeMismatchError


def image_to_array(image: Image.Image) -> np.ndarray:
    """
    Convert a PIL image to a (height, width) grayscale uint8 array.

    Args:
        image: Any PIL image (converted to 'L' when needed)

    Returns:
        New uint8 array, row-major
    """
    if image.mode != 'L':
        image = image.convert('L')
    width, height = image.size
    return from_flat(image.tobytes(), width, height)


def from_flat(
    raw: Union[bytes, Sequence[int], np.ndarray],
    width: int,
    height: int,
    dtype=np.uint8,
) -> np.ndarray:
    """
    Reshape a flat row-major pixel buffer into a (height, width) array.

    Raises:
        ArrayShapeMismatchError: buffer length doesn't equal width * height
    """
    if isinstance(raw, (bytes, bytearray)):
        flat = np.frombuffer(raw, dtype=dtype)
    else:
        flat = np.asarray(raw, dtype=dtype).ravel()

    if width < 0 or height < 0 or flat.size != width * height:
        raise ArrayShapeMismatchError(
            f"{flat.size} values cannot form a {height}x{width} buffer"
        )
    return flat.reshape(height, width).copy()


def array_to_image(arr: np.ndarray) -> Image.Image:
    """Convert a 2-D uint8 array back into an 'L' mode PIL image."""
    arr = np.asarray(arr)
    if arr.ndim != 2:
        raise ArrayShapeMismatchError(f"expected a 2-D array, got shape {arr.shape}")
    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)
    return Image.fromarray(np.ascontiguousarray(arr))


def cell_grid_shape(size: Tuple[int, int], cell_size: int) -> Tuple[int, int]:
    """
    Number of (rows, cols) of whole cells that fit in an image.

    Args:
        size: PIL-style (width, height)
        cell_size: Cell edge length in pixels
    """
    width, height = size
    return height // cell_size, width // cell_size


SIXTEEN_BIT_MODES = ('I;16', 'I;16L', 'I;16B', 'I;16N')


def to_8bit(image: Image.Image) -> Image.Image:
    """
    Bring any PIL image to 'L' or 'RGB' with values scaled to 0-255.

    Pillow's convert() clips wide grayscale modes instead of scaling them,
    so those are rescaled here: 16-bit and 32-bit integer modes are read as
    0-65535, float mode as 0-1. Everything else goes through convert('RGB').
    """
    if image.mode in ('L', 'RGB'):
        return image
    if image.mode in SIXTEEN_BIT_MODES or image.mode == 'I':
        scaled = np.asarray(image).astype(np.float64) / 257.0
    elif image.mode == 'F':
        scaled = np.asarray(image).astype(np.float64) * 255.0
    else:
        return image.convert('RGB')
    return array_to_image(np.clip(np.rint(scaled), 0, 255).astype(np.uint8))
