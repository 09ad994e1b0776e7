"""
Character Set Definitions

A CharacterSet pairs two palettes:
- tile: luminance glyphs ordered from emptiest to densest
- edge: five orientation glyphs (none, horizontal, vertical, diagonal-1, diagonal-2)

Index 0 of the edge palette is the blank "no edge" marker, so a zero in an
edge-class grid always means "fall back to the tile glyph".
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np
from PIL import Image, ImageDraw, ImageFont


# ============================================================================
# CHARACTER SET DEFINITIONS
# ============================================================================

# Emptiest -> densest
TILE_DEFAULT = " .,*:coPO?%&@"
TILE_STANDARD = " .:-=+*#%@"
TILE_DETAILED = " .'`^\",:;Il!i><~+_-?][}{1)(|/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"
TILE_BLOCKS = " ░▒▓█"
TILE_SIMPLE = " .oO@"

# Fixed until edge classification depends on the allowed edge glyphs
EDGE_DEFAULT = " _|/\\"
EDGE_CLASS_COUNT = 5


@dataclass(frozen=True)
class CharacterSet:
    """
    Tile and edge palettes used to build the character grid.

    Attributes:
        tile: Luminance glyphs, emptiest first (at least one)
        edge: Exactly five edge glyphs, blank first
        name: Identifier for presets
    """
    tile: Tuple[str, ...] = tuple(TILE_DEFAULT)
    edge: Tuple[str, ...] = tuple(EDGE_DEFAULT)
    name: str = field(default="custom", compare=False)

    def __post_init__(self):
        # Accept plain strings and lists
        object.__setattr__(self, 'tile', tuple(self.tile))
        object.__setattr__(self, 'edge', tuple(self.edge))

        if len(self.tile) < 1:
            raise ValueError("Tile palette needs at least one character")
        if len(self.edge) != EDGE_CLASS_COUNT:
            raise ValueError(
                f"Edge palette needs exactly {EDGE_CLASS_COUNT} characters, got {len(self.edge)}"
            )
        for ch in self.tile + self.edge:
            if len(ch) != 1:
                raise ValueError(f"Palette entries must be single characters, got {ch!r}")

    @classmethod
    def from_tiles(cls, tile: Sequence[str], name: str = "custom") -> "CharacterSet":
        """Build a set with custom tile glyphs and the default edge glyphs."""
        return cls(tile=tuple(tile), edge=tuple(EDGE_DEFAULT), name=name)

    @property
    def tile_count(self) -> int:
        return len(self.tile)

    @property
    def edge_count(self) -> int:
        return len(self.edge)

    def tile_array(self) -> np.ndarray:
        return np.array(self.tile, dtype='<U1')

    def edge_array(self) -> np.ndarray:
        return np.array(self.edge, dtype='<U1')

    def tile_index(self, char: str) -> Optional[int]:
        try:
            return self.tile.index(char)
        except ValueError:
            return None

    def edge_index(self, char: str) -> Optional[int]:
        try:
            return self.edge.index(char)
        except ValueError:
            return None


# ============================================================================
# CHARSET FACTORY
# ============================================================================

_TILE_PRESETS: Dict[str, str] = {
    "default": TILE_DEFAULT,
    "standard": TILE_STANDARD,
    "detailed": TILE_DETAILED,
    "blocks": TILE_BLOCKS,
    "simple": TILE_SIMPLE,
}


def get_charset(name: str = "default") -> CharacterSet:
    """
    Get a character set by name.

    Available charsets:
        - default: 13 glyphs tuned for 4px cells
        - standard: classic 10-step ramp
        - detailed: 70-step ramp
        - blocks: shade blocks (░▒▓█)
        - simple: 5-step ramp

    Raises:
        ValueError: unknown name
    """
    key = name.lower()
    if key not in _TILE_PRESETS:
        raise ValueError(f"Unknown charset: {name}. Available: {list_charsets()}")
    return CharacterSet.from_tiles(_TILE_PRESETS[key], name=key)


def list_charsets() -> List[str]:
    """List all available charset names."""
    return list(_TILE_PRESETS)


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def glyph_coverage(char: str, font: ImageFont.ImageFont, cell: int = 16) -> float:
    """
    Fraction of a cell covered by a glyph's ink (0-1).

    Args:
        char: Single character to render
        font: Font to rasterize with
        cell: Canvas edge length in pixels
    """
    img = Image.new('L', (cell, cell), color=0)
    draw = ImageDraw.Draw(img)
    draw.text((0, 0), char, fill=255, font=font)
    arr = np.array(img)
    return float((arr >= 128).sum()) / arr.size


def sort_by_density(chars: Sequence[str], font: ImageFont.ImageFont, cell: int = 16) -> str:
    """
    Order characters from emptiest to densest as rendered by a font.

    Useful for building a tile palette for a font other than the default.
    Ties keep their original order.
    """
    coverage = {ch: glyph_coverage(ch, font, cell) for ch in dict.fromkeys(chars)}
    return "".join(sorted(coverage, key=coverage.__getitem__))
