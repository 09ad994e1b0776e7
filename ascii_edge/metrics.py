"""
Quality Metrics

Provides metrics to evaluate a rendered conversion:
- SSIM (Structural Similarity Index) against the source
- Character distribution of the grid
"""

from typing import Dict
import numpy as np
from PIL import Image
from skimage.metrics import structural_similarity as ssim


def compute_ssim(rendered: Image.Image, source: Image.Image) -> float:
    """
    Compute SSIM between a rendered conversion and its source.

    The source is resized to the rendered size and both are compared in
    grayscale.

    Returns:
        SSIM score (-1 to 1, higher is better)
    """
    rendered_gray = np.array(rendered.convert('L'))
    source_gray = np.array(
        source.convert('L').resize(rendered.size, Image.Resampling.LANCZOS)
    )
    # skimage needs at least a 7x7 window
    win_size = min(7, *rendered_gray.shape)
    if win_size % 2 == 0:
        win_size -= 1
    if win_size < 3:
        return 1.0 if np.array_equal(rendered_gray, source_gray) else 0.0
    return float(ssim(rendered_gray, source_gray, data_range=255, win_size=win_size))


def character_distribution(grid: np.ndarray) -> Dict[str, int]:
    """Count of each character in the grid, most common first."""
    chars, counts = np.unique(np.asarray(grid), return_counts=True)
    order = np.argsort(-counts, kind='stable')
    return {str(chars[i]): int(counts[i]) for i in order}
