"""
Conversion Result Container

Holds the final character grid together with the intermediate grids that
produced it and, when rendering ran, the output image.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import numpy as np
from PIL import Image

from .edges import NONE


@dataclass
class ConversionResult:
    """
    Attributes:
        grid: Final (rows, cols) character grid
        tile_grid: Luminance glyphs before edges were merged in
        edge_classes: Downscaled (rows, cols) edge classes
        image: Rendered output, if any
        source_image: Image the grid was built from
        metadata: Conversion parameters and timings
    """
    grid: np.ndarray
    tile_grid: np.ndarray
    edge_classes: np.ndarray
    image: Optional[Image.Image] = None
    source_image: Optional[Image.Image] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> int:
        """Width in characters."""
        return int(self.grid.shape[1]) if self.grid.ndim == 2 else 0

    @property
    def height(self) -> int:
        """Height in lines."""
        return int(self.grid.shape[0])

    @property
    def text(self) -> str:
        return '\n'.join(''.join(row) for row in self.grid)

    @property
    def lines(self):
        return [''.join(row) for row in self.grid]

    def display(self, max_width: Optional[int] = None):
        """
        Print the character grid to the terminal.

        Args:
            max_width: Maximum width to display (truncates if needed)
        """
        for line in self.lines:
            print(line[:max_width] if max_width else line)

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the character grid."""
        cells = self.width * self.height
        edge_cells = int((self.edge_classes != NONE).sum())
        return {
            'width': self.width,
            'height': self.height,
            'cells': cells,
            'unique_characters': len(set(self.grid.ravel().tolist())),
            'edge_cells': edge_cells,
            'edge_ratio': edge_cells / cells if cells else 0.0,
        }

    def __repr__(self) -> str:
        return f"ConversionResult(width={self.width}, height={self.height})"

    def __str__(self) -> str:
        return self.text
