"""
Gradient-Based Edge Classifier

Computes Sobel gradients over the full-resolution grayscale image and bins
each pixel's gradient angle into one of five edge classes. The bucket
boundaries are tuned by eye to the line directions a monospace glyph can
draw; they are not derived from a formula.

theta_norm = atan2(gy, gx) / pi * 0.5 + 0.5

| theta_norm                        | class          |
|-----------------------------------|----------------|
| == 0.5                            | NONE (0)       |
| [0.95, 1.0]                       | VERTICAL (2)   |
| [0.25, 0.27) or [0.75, 0.77)      | HORIZONTAL (1) |
| [0.0, 0.28) or [0.55, 0.78), rest | DIAGONAL_1 (3) |
| [0.28, 0.55) or [0.78, 1.0), rest | DIAGONAL_2 (4) |

"rest" means with the rows above removed, which keeps the buckets disjoint.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple
import logging
import numpy as np
import cv2

from .errors import ProcessingError
from .filters import check_gray


logger = logging.getLogger(__name__)

NONE = 0
HORIZONTAL = 1
VERTICAL = 2
DIAGONAL_1 = 3
DIAGONAL_2 = 4

CLASS_NAMES = ("none", "horizontal", "vertical", "diagonal_1", "diagonal_2")

SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float32)
SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.float32)


def sobel_gradients(gray: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Horizontal and vertical Sobel responses.

    The kernels are applied as a true convolution (flipped), with
    replicated borders. Results are integers, so a flat region gives an
    exact zero.

    Returns:
        (gx, gy) int32 arrays, same shape as gray
    """
    check_gray(gray)
    try:
        gx = cv2.filter2D(gray, cv2.CV_16S, cv2.flip(SOBEL_X, -1),
                          borderType=cv2.BORDER_REPLICATE)
        gy = cv2.filter2D(gray, cv2.CV_16S, cv2.flip(SOBEL_Y, -1),
                          borderType=cv2.BORDER_REPLICATE)
    except cv2.error as err:
        raise ProcessingError(f"sobel: {err}") from err
    return gx.astype(np.int32), gy.astype(np.int32)


def normalized_angle(gx: np.ndarray, gy: np.ndarray) -> np.ndarray:
    """Gradient angle mapped from [-pi, pi] onto [0, 1]."""
    theta = np.arctan2(np.asarray(gy, dtype=np.float64), np.asarray(gx, dtype=np.float64))
    return theta / np.pi * 0.5 + 0.5


def edge_masks(theta_norm: np.ndarray) -> List[np.ndarray]:
    """
    One boolean mask per edge class, indexed by class value.

    The masks are disjoint and together cover every value in [0, 1].
    """
    x = np.asarray(theta_norm, dtype=np.float64)

    none = x == 0.5
    vertical = (x >= 0.95) & (x <= 1.0)
    horizontal = ((x >= 0.25) & (x < 0.27)) | ((x >= 0.75) & (x < 0.77))
    taken = none | vertical | horizontal

    diagonal_1 = (((x >= 0.0) & (x < 0.28)) | ((x >= 0.55) & (x < 0.78))) & ~taken
    diagonal_2 = (((x >= 0.28) & (x < 0.55)) | ((x >= 0.78) & (x < 1.0))) & ~taken

    return [none, horizontal, vertical, diagonal_1, diagonal_2]


def classify(theta_norm: np.ndarray) -> np.ndarray:
    """Map normalized angles to edge classes (uint8, 0-4)."""
    masks = edge_masks(theta_norm)
    classes = np.zeros(np.shape(theta_norm), dtype=np.uint8)
    # NONE is already 0
    for value in (HORIZONTAL, VERTICAL, DIAGONAL_1, DIAGONAL_2):
        classes[masks[value]] = value
    return classes


class EdgeDetector(ABC):
    """Turns a grayscale buffer into a per-pixel edge-class buffer."""

    name = "edge"

    @abstractmethod
    def apply(self, gray: np.ndarray) -> np.ndarray:
        ...


class SobelEdgeDetector(EdgeDetector):
    """Sobel orientation binned into the five edge classes."""

    name = "sobel"

    def apply(self, gray: np.ndarray) -> np.ndarray:
        gx, gy = sobel_gradients(gray)
        classes = classify(normalized_angle(gx, gy))
        logger.debug(
            "sobel classes on %s: %s",
            classes.shape,
            np.bincount(classes.ravel(), minlength=len(CLASS_NAMES)).tolist(),
        )
        return classes

    def __repr__(self) -> str:
        return "SobelEdgeDetector()"
