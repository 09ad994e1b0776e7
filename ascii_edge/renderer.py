"""
Character Grid Renderer

Draws a character grid into an RGB image, one cell_size x cell_size cell
per character. Rows are drawn in parallel into their own band images and
pasted back at fixed offsets, so the output doesn't depend on which band
finishes first.
"""

from typing import Optional, Tuple, Union
import logging
import numpy as np
from PIL import Image, ImageDraw

from .fonts import FontSettings, load_font
from .parallel import map_row_bands


logger = logging.getLogger(__name__)

Color = Union[int, Tuple[int, int, int]]

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


def to_rgb(color: Color) -> Tuple[int, int, int]:
    """Accept a gray level or an RGB tuple."""
    if isinstance(color, (int, np.integer)):
        v = int(color)
        return v, v, v
    r, g, b = color
    return int(r), int(g), int(b)


class Renderer:
    """
    Render character grids with a monospace cell layout.

    Example:
        >>> renderer = Renderer(FontSettings(cell_size=8))
        >>> img = renderer.render(grid)
        >>> img.size == (grid.shape[1] * 8, grid.shape[0] * 8)
        True
    """

    def __init__(
        self,
        font_settings: Optional[FontSettings] = None,
        background: Color = BLACK,
        foreground: Color = WHITE,
        sample_colors: bool = False,
        workers: Optional[int] = None,
        band_rows: int = 8,
    ):
        """
        Args:
            font_settings: Cell size and font file
            background: Canvas color
            foreground: Glyph color when not sampling
            sample_colors: Take each glyph's color from the source image
            workers: Threads for row bands (None = default, 1 = inline)
            band_rows: Grid rows per band
        """
        self.font_settings = font_settings or FontSettings()
        self.background = to_rgb(background)
        self.foreground = to_rgb(foreground)
        self.sample_colors = sample_colors
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.workers = workers
        self.band_rows = band_rows

    def output_size(self, grid: np.ndarray) -> Tuple[int, int]:
        """PIL (width, height) of the rendered grid."""
        rows, cols = np.shape(grid)
        cell = self.font_settings.cell_size
        return cols * cell, rows * cell

    def _cell_colors(self, color_source: Optional[Image.Image], rows: int, cols: int) -> Optional[np.ndarray]:
        if not self.sample_colors:
            return None
        if color_source is None:
            raise ValueError("sample_colors needs a color_source image")
        resized = color_source.convert('RGB').resize((cols, rows), Image.Resampling.BICUBIC)
        return np.array(resized)

    def render(self, grid: np.ndarray, color_source: Optional[Image.Image] = None) -> Image.Image:
        """
        Draw a character grid.

        Args:
            grid: (rows, cols) array of single characters
            color_source: Image sampled per cell when sample_colors is on

        Returns:
            RGB image of size (cols * cell_size, rows * cell_size)
        """
        grid = np.asarray(grid)
        rows, cols = grid.shape
        cell = self.font_settings.cell_size
        font = load_font(self.font_settings)
        colors = self._cell_colors(color_source, rows, cols)

        def draw_band(start: int, stop: int) -> Image.Image:
            band = Image.new('RGB', (cols * cell, (stop - start) * cell), self.background)
            for y in range(start, stop):
                # Descenders are clipped to their own row
                strip = Image.new('RGB', (cols * cell, cell), self.background)
                draw = ImageDraw.Draw(strip)
                for x, ch in enumerate(grid[y]):
                    if ch == ' ':
                        continue
                    fill = tuple(int(c) for c in colors[y, x]) if colors is not None else self.foreground
                    draw.text((x * cell, 0), str(ch), font=font, fill=fill)
                band.paste(strip, (0, (y - start) * cell))
            return band

        canvas = Image.new('RGB', self.output_size(grid), self.background)
        for start, band in map_row_bands(draw_band, rows, workers=self.workers, band_rows=self.band_rows):
            canvas.paste(band, (0, start * cell))

        logger.debug("rendered %dx%d grid to %s", rows, cols, canvas.size)
        return canvas


def render_grid(
    grid: np.ndarray,
    font_settings: Optional[FontSettings] = None,
    background: Color = BLACK,
    foreground: Color = WHITE,
) -> Image.Image:
    """Convenience wrapper for a single fixed-color render."""
    return Renderer(font_settings, background, foreground).render(grid)
