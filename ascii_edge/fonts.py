"""
Font Loading

FontSettings fixes the cell size and font file for one conversion. The
loader reads the file, parses it at the cell size, and falls back once to
Pillow's bundled default font when the custom font can't be parsed.
"""

from dataclasses import dataclass
from typing import Optional
import io
import logging
from PIL import ImageFont

from .errors import FileAccessError, InvalidFontError


logger = logging.getLogger(__name__)

# 4px is the smallest cell that still shows the default glyphs legibly
DEFAULT_CELL_SIZE = 4


@dataclass(frozen=True)
class FontSettings:
    """
    Attributes:
        cell_size: Cell edge length in pixels, also the font size
        font_path: TrueType/OpenType file; None uses the bundled default
    """
    cell_size: int = DEFAULT_CELL_SIZE
    font_path: Optional[str] = None

    def __post_init__(self):
        if self.cell_size < 1:
            raise ValueError(f"cell_size must be >= 1, got {self.cell_size}")


def load_default_font(size: int) -> ImageFont.ImageFont:
    """Pillow's bundled font at the requested size."""
    try:
        return ImageFont.load_default(size=size)
    except (OSError, ValueError) as err:
        raise InvalidFontError(f"bundled default font: {err}") from err


def load_font(settings: FontSettings) -> ImageFont.ImageFont:
    """
    Load the font described by settings.

    Raises:
        FileAccessError: font file can't be read
        InvalidFontError: neither the custom nor the bundled font parses
    """
    if settings.font_path is None:
        return load_default_font(settings.cell_size)

    try:
        with open(settings.font_path, 'rb') as f:
            data = f.read()
    except OSError as err:
        raise FileAccessError(f"{settings.font_path}: {err}") from err

    try:
        return ImageFont.truetype(io.BytesIO(data), settings.cell_size)
    except (OSError, ValueError) as err:
        logger.warning("Could not parse font %s (%s); using bundled default", settings.font_path, err)

    return load_default_font(settings.cell_size)
