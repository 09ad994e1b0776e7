"""
Image -> Character Grid -> Image Converter

Unified interface combining:
- Tile path: resize to the cell grid, grayscale, tile filters, quantize
- Edge path: full-resolution grayscale, edge filters, Sobel classes,
  histogram downscale
- Compositing (edges win) and rendering with a glyph font

This is the main entry point for the library.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging
import time
from PIL import Image, UnidentifiedImageError

from .buffers import cell_grid_shape, image_to_array, to_8bit
from .charsets import CharacterSet
from .compositor import compose
from .downscale import EdgeDownscaler
from .edges import EdgeDetector, SobelEdgeDetector
from .errors import FileAccessError, ImageError, ProcessingError
from .filters import Filter, apply_chain, default_edge_chain
from .fonts import FontSettings
from .quantize import quantize
from .renderer import BLACK, WHITE, Color, Renderer
from .result import ConversionResult


logger = logging.getLogger(__name__)


@dataclass
class ConverterConfig:
    """Configuration for a conversion. Read-only once handed to a Converter."""
    font_settings: FontSettings = field(default_factory=FontSettings)
    charset: CharacterSet = field(default_factory=CharacterSet)
    tile_filters: List[Filter] = field(default_factory=list)
    edge_filters: List[Filter] = field(default_factory=default_edge_chain)
    edge_detector: EdgeDetector = field(default_factory=SobelEdgeDetector)
    background: Color = BLACK
    foreground: Color = WHITE
    sample_colors: bool = False        # Glyph color from the source image
    workers: Optional[int] = None      # Threads for downscale/render bands

    def __post_init__(self):
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")


# =============================================================================
# File I/O
# =============================================================================

def read_image(path: str) -> Image.Image:
    """
    Open and fully decode an image.

    Raises:
        FileAccessError: missing or unreadable path
        ImageError: not a decodable image
    """
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except UnidentifiedImageError as err:
        raise ImageError(f"{path}: {err}") from err
    except (FileNotFoundError, PermissionError, IsADirectoryError) as err:
        raise FileAccessError(f"{path}: {err}") from err
    except (OSError, ValueError, Image.DecompressionBombError) as err:
        raise ImageError(f"{path}: {err}") from err


def write_image(image: Image.Image, path: str):
    """
    Save an image; the format follows the path's extension.

    Raises:
        FileAccessError: destination not writable
        ImageError: unknown extension or the format can't encode the image
    """
    try:
        image.save(path)
    except (FileNotFoundError, PermissionError, IsADirectoryError) as err:
        raise FileAccessError(f"{path}: {err}") from err
    except (OSError, ValueError, KeyError) as err:
        raise ImageError(f"{path}: {err}") from err


# =============================================================================
# Converter
# =============================================================================

class Converter:
    """
    Image to character-grid converter.

    Example:
        >>> converter = Converter()
        >>> result = converter.convert("photo.png", "photo_ascii.png", 0.2)
        >>> result.display()
    """

    def __init__(self, config: Optional[ConverterConfig] = None):
        self.config = config or ConverterConfig()
        self.renderer = Renderer(
            self.config.font_settings,
            background=self.config.background,
            foreground=self.config.foreground,
            sample_colors=self.config.sample_colors,
            workers=self.config.workers,
        )

    @property
    def cell_size(self) -> int:
        return self.config.font_settings.cell_size

    def analyze(self, image: Image.Image, sharpen_threshold: float = 0.0) -> ConversionResult:
        """
        Build the character grid for an image without rendering it.

        Args:
            image: Source image (any mode)
            sharpen_threshold: Density gate for the edge downscaler, 0-1

        Returns:
            ConversionResult with image=None

        Raises:
            ProcessingError: sharpen_threshold outside [0, 1]
            ImageError: image smaller than one cell
        """
        if not 0.0 <= sharpen_threshold <= 1.0:
            raise ProcessingError(f"sharpen_threshold must be in [0, 1], got {sharpen_threshold}")
        start_time = time.time()
        cfg = self.config
        image = to_8bit(image)
        rows, cols = cell_grid_shape(image.size, self.cell_size)
        if rows == 0 or cols == 0:
            raise ImageError(
                f"image {image.size[0]}x{image.size[1]} is smaller than one {self.cell_size}px cell"
            )

        # Tile path: one pixel per cell
        resized = image.resize((cols, rows), Image.Resampling.BICUBIC)
        tile_gray = apply_chain(cfg.tile_filters, image_to_array(resized))
        tile_grid = quantize(tile_gray, cfg.charset.tile)

        # Edge path: full resolution
        edge_gray = apply_chain(cfg.edge_filters, image_to_array(image))
        pixel_classes = cfg.edge_detector.apply(edge_gray)
        downscaler = EdgeDownscaler(self.cell_size, sharpen_threshold, cfg.workers)
        edge_classes = downscaler.apply(pixel_classes, (rows, cols))

        grid = compose(tile_grid, edge_classes, cfg.charset.edge)
        elapsed = time.time() - start_time
        logger.debug("analyzed %s into %dx%d cells in %.3fs", image.size, rows, cols, elapsed)

        return ConversionResult(
            grid=grid,
            tile_grid=tile_grid,
            edge_classes=edge_classes,
            metadata={
                'source_size': image.size,
                'cell_size': self.cell_size,
                'sharpen_threshold': sharpen_threshold,
                'charset': cfg.charset.name,
                'tile_filters': [f.name for f in cfg.tile_filters],
                'edge_filters': [f.name for f in cfg.edge_filters],
                'edge_detector': cfg.edge_detector.name,
                'analysis_time': elapsed,
            },
        )

    def convert_image(self, image: Image.Image, sharpen_threshold: float = 0.0) -> ConversionResult:
        """Analyze and render an in-memory image."""
        image = to_8bit(image)
        result = self.analyze(image, sharpen_threshold)
        start_time = time.time()
        result.image = self.renderer.render(result.grid, color_source=image)
        result.source_image = image
        result.metadata['render_time'] = time.time() - start_time
        return result

    def convert(self, input_path: str, output_path: str, sharpen_threshold: float = 0.0) -> ConversionResult:
        """
        Read an image file, convert it and write the rendered result.

        Any stage failing aborts the conversion with a ConvertError subclass.
        """
        image = read_image(input_path)
        result = self.convert_image(image, sharpen_threshold)
        write_image(result.image, output_path)
        result.metadata['input_path'] = str(input_path)
        result.metadata['output_path'] = str(output_path)
        logger.info("Converted %s -> %s (%dx%d cells)", input_path, output_path, result.height, result.width)
        return result

    def convert_video(self, path: str):
        """Video input is not supported."""
        raise NotImplementedError("video conversion is not implemented")


# =============================================================================
# Preset Configurations
# =============================================================================

def create_default_converter(cell_size: int = 4, font_path: Optional[str] = None) -> Converter:
    """Default edge filter chain, white on black."""
    config = ConverterConfig(font_settings=FontSettings(cell_size, font_path))
    return Converter(config)


def create_plain_converter(cell_size: int = 4, font_path: Optional[str] = None) -> Converter:
    """Edges detected on the unfiltered image (sharper, noisier)."""
    config = ConverterConfig(
        font_settings=FontSettings(cell_size, font_path),
        edge_filters=[],
    )
    return Converter(config)


def create_color_converter(cell_size: int = 8, font_path: Optional[str] = None) -> Converter:
    """Glyphs colored from the source image on black."""
    config = ConverterConfig(
        font_settings=FontSettings(cell_size, font_path),
        sample_colors=True,
    )
    return Converter(config)


# =============================================================================
# Convenience Functions
# =============================================================================

def convert(
    input_path: str,
    output_path: str,
    sharpen_threshold: float = 0.0,
    config: Optional[ConverterConfig] = None,
) -> ConversionResult:
    """
    Convert an image file into a rendered character-grid image.

    Args:
        input_path: Source image (any Pillow-readable format)
        output_path: Destination; format from the extension
        sharpen_threshold: Density gate for edge cells, 0-1
        config: Converter settings (defaults if None)

    Returns:
        ConversionResult with the rendered image attached
    """
    return Converter(config).convert(input_path, output_path, sharpen_threshold)
