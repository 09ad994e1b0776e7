"""
Edge-Aware Image-to-ASCII Converter

Converts a raster image into a grid of characters that follows both its
luminance and its edge structure, then renders the grid back to an image:
- Configurable OpenCV filter chains for the tile and edge paths
- Sobel orientation binned into five edge glyphs
- Histogram majority-vote downscaling with a density gate
- Glyph rendering with Pillow fonts, optionally colored from the source
"""

__version__ = "0.1.0"

from .charsets import CharacterSet, get_charset, list_charsets
from .converter import Converter, ConverterConfig, convert
from .errors import (
    ArrayShapeMismatchError,
    ConvertError,
    FileAccessError,
    ImageError,
    InvalidFontError,
    ProcessingError,
)
from .fonts import FontSettings
from .result import ConversionResult

__all__ = [
    "CharacterSet",
    "get_charset",
    "list_charsets",
    "Converter",
    "ConverterConfig",
    "convert",
    "ConversionResult",
    "FontSettings",
    "ConvertError",
    "ImageError",
    "FileAccessError",
    "ArrayShapeMismatchError",
    "InvalidFontError",
    "ProcessingError",
]
