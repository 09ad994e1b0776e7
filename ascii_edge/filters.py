"""
Grayscale Filter Chain

Stateless grayscale -> grayscale transforms applied before quantization
(tile path) or before edge detection (edge path):
- SharpenGaussian: unsharp mask
- DifferenceOfGaussians: band-pass, emphasizes edges
- MedianBlur: removes salt-and-pepper noise
- BilateralFilter: edge-preserving smoothing
- Threshold: to-zero-inverted, suppresses strong responses
- Sharpen3x3: fixed 3x3 sharpening kernel

Every filter takes a 2-D uint8 array and returns a new one; the input is
never modified. Output is deterministic for the same input and parameters.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Sequence, Type
import logging
import numpy as np
import cv2

from .errors import ProcessingError


logger = logging.getLogger(__name__)


def check_gray(gray: np.ndarray) -> np.ndarray:
    """
    Validate a grayscale buffer.

    Raises:
        ProcessingError: not a non-empty 2-D uint8 array
    """
    if not isinstance(gray, np.ndarray):
        raise ProcessingError(f"expected numpy array, got {type(gray).__name__}")
    if gray.ndim != 2:
        raise ProcessingError(f"expected 2-D grayscale buffer, got shape {gray.shape}")
    if gray.dtype != np.uint8:
        raise ProcessingError(f"expected uint8 buffer, got {gray.dtype}")
    if gray.size == 0:
        raise ProcessingError("empty buffer")
    return gray


def _gaussian(gray: np.ndarray, sigma: float) -> np.ndarray:
    # ksize (0, 0) lets OpenCV derive the kernel size from sigma
    return cv2.GaussianBlur(gray, (0, 0), sigmaX=sigma, sigmaY=sigma,
                            borderType=cv2.BORDER_REPLICATE)


class Filter(ABC):
    """A grayscale transform with a fixed apply() contract."""

    name = "filter"

    @abstractmethod
    def _run(self, gray: np.ndarray) -> np.ndarray:
        ...

    def apply(self, gray: np.ndarray) -> np.ndarray:
        """
        Apply the filter.

        Args:
            gray: 2-D uint8 buffer

        Returns:
            New 2-D uint8 buffer of the same shape

        Raises:
            ProcessingError: malformed input or OpenCV failure
        """
        check_gray(gray)
        try:
            out = self._run(np.ascontiguousarray(gray))
        except cv2.error as err:
            raise ProcessingError(f"{self.name}: {err}") from err
        return out

    def __call__(self, gray: np.ndarray) -> np.ndarray:
        return self.apply(gray)


@dataclass
class SharpenGaussian(Filter):
    """Unsharp mask: in + amount * (in - blur(in)), clamped to 0-255."""
    sigma: float = 1.0
    amount: float = 1.0

    name = "sharpen"

    def __post_init__(self):
        if self.sigma <= 0:
            raise ProcessingError(f"sharpen sigma must be positive, got {self.sigma}")

    def _run(self, gray: np.ndarray) -> np.ndarray:
        original = gray.astype(np.float32)
        blurred = _gaussian(original, self.sigma)
        sharpened = original + self.amount * (original - blurred)
        return np.clip(np.rint(sharpened), 0, 255).astype(np.uint8)


@dataclass
class DifferenceOfGaussians(Filter):
    """
    Difference of Gaussians: blur(sigma_2) - blur(sigma_1).

    The subtraction happens in int32 and is clamped back to 0-255, so only
    regions darker than their wider surroundings survive.
    """
    sigma_1: float = 1.0
    sigma_2: float = 3.5

    name = "dog"

    def __post_init__(self):
        if not 0 < self.sigma_1 < self.sigma_2:
            raise ProcessingError(
                f"DoG needs 0 < sigma_1 < sigma_2, got {self.sigma_1}, {self.sigma_2}"
            )

    def _run(self, gray: np.ndarray) -> np.ndarray:
        narrow = _gaussian(gray, self.sigma_1).astype(np.int32)
        wide = _gaussian(gray, self.sigma_2).astype(np.int32)
        return np.clip(wide - narrow, 0, 255).astype(np.uint8)


@dataclass
class MedianBlur(Filter):
    """Median over a (2 * radius + 1) square window."""
    radius: int = 2

    name = "median"

    def __post_init__(self):
        if self.radius < 0:
            raise ProcessingError(f"median radius must be >= 0, got {self.radius}")

    def _run(self, gray: np.ndarray) -> np.ndarray:
        if self.radius == 0:
            return gray.copy()
        return cv2.medianBlur(gray, 2 * int(self.radius) + 1)


@dataclass
class BilateralFilter(Filter):
    """
    Edge-preserving smoothing.

    Neighbours within window_size pixels are weighted by spatial distance
    (sigma_spatial) and by intensity difference (sigma_color).
    """
    window_size: int = 10
    sigma_color: float = 2.0
    sigma_spatial: float = 5.0

    name = "bilateral"

    def __post_init__(self):
        if self.window_size < 1:
            raise ProcessingError(f"bilateral window must be >= 1, got {self.window_size}")

    def _run(self, gray: np.ndarray) -> np.ndarray:
        return cv2.bilateralFilter(
            gray,
            d=2 * int(self.window_size) + 1,
            sigmaColor=self.sigma_color,
            sigmaSpace=self.sigma_spatial,
            borderType=cv2.BORDER_REPLICATE,
        )


@dataclass
class Threshold(Filter):
    """
    To-zero-inverted threshold.

    Pixels strictly above `threshold` become 0; pixels at or below keep
    their value.
    """
    threshold: int = 10

    name = "threshold"

    def __post_init__(self):
        if not 0 <= self.threshold <= 255:
            raise ProcessingError(f"threshold must be in 0-255, got {self.threshold}")

    def _run(self, gray: np.ndarray) -> np.ndarray:
        _, out = cv2.threshold(gray, int(self.threshold), 255, cv2.THRESH_TOZERO_INV)
        return out


SHARPEN_KERNEL = np.array([[0, -1, 0], [-1, 5, -1], [0, -1, 0]], dtype=np.float32)


@dataclass
class Sharpen3x3(Filter):
    name = "sharpen3x3"

    def _run(self, gray: np.ndarray) -> np.ndarray:
        return cv2.filter2D(gray, -1, SHARPEN_KERNEL, borderType=cv2.BORDER_REPLICATE)


# =============================================================================
# Chains
# =============================================================================

FILTERS: Dict[str, Type[Filter]] = {
    "sharpen": SharpenGaussian,
    "dog": DifferenceOfGaussians,
    "median": MedianBlur,
    "bilateral": BilateralFilter,
    "threshold": Threshold,
    "sharpen3x3": Sharpen3x3,
}


def apply_chain(filters: Sequence[Filter], gray: np.ndarray) -> np.ndarray:
    """
    Run filters in order. An empty chain returns a copy of the input.

    The first failing filter aborts the chain.
    """
    out = check_gray(gray).copy()
    for f in filters:
        out = f.apply(out)
        logger.debug("%s -> mean %.1f", f.name, float(out.mean()))
    return out


def build_chain(names: Sequence[str]) -> List[Filter]:
    """
    Build a chain of default-parameter filters from names.

    >>> build_chain(["sharpen", "median"])
    [SharpenGaussian(sigma=1.0, amount=1.0), MedianBlur(radius=2)]
    """
    chain = []
    for name in names:
        key = name.strip().lower()
        if not key:
            continue
        if key not in FILTERS:
            raise ValueError(f"Unknown filter: {name}. Available: {list(FILTERS)}")
        chain.append(FILTERS[key]())
    return chain


def default_edge_chain() -> List[Filter]:
    """Edge-path chain: sharpen, DoG, bilateral, median, threshold."""
    return [
        SharpenGaussian(),
        DifferenceOfGaussians(),
        BilateralFilter(),
        MedianBlur(),
        Threshold(),
    ]
