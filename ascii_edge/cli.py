"""
Image-to-ASCII Image Converter CLI

Converts images into character grids and renders them back to images.

Usage:
    ascii-edge photo.png                         # writes photo_ascii.png
    ascii-edge photo.png -o out.png -t 0.2       # custom output and edge gate
    ascii-edge *.jpg --output-dir converted      # batch mode
    ascii-edge --help                            # Help
"""

import argparse
import logging
import sys
from typing import List, Optional

from .batch import BatchConverter, BatchItem
from .charsets import get_charset, list_charsets
from .converter import Converter, ConverterConfig
from .filters import FILTERS, build_chain, default_edge_chain
from .fonts import FontSettings
from .metrics import character_distribution, compute_ssim
from .renderer import Color


LOG = logging.getLogger("ascii_edge")

DEFAULT_EDGE_FILTERS = ",".join(f.name for f in default_edge_chain())


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    LOG.handlers[:] = [handler]
    LOG.setLevel(level)
    LOG.propagate = False


def parse_color(value: str) -> Color:
    """'30' -> 30, '255,128,0' -> (255, 128, 0)"""
    try:
        parts = [int(p) for p in value.split(',')]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid color: {value!r}")
    if len(parts) not in (1, 3) or any(not 0 <= p <= 255 for p in parts):
        raise argparse.ArgumentTypeError(f"color must be N or R,G,B with 0-255 values: {value!r}")
    return parts[0] if len(parts) == 1 else tuple(parts)


def parse_threshold(value: str) -> float:
    try:
        t = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid threshold: {value!r}")
    if not 0.0 <= t <= 1.0:
        raise argparse.ArgumentTypeError(f"threshold must be between 0 and 1, got {t}")
    return t


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ascii-edge",
        description="Convert images to edge-aware ASCII art images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ascii-edge photo.png
    Writes photo_ascii.png next to the input

  ascii-edge photo.png -o art.png --cell-size 8 --color
    Bigger cells, glyphs colored from the photo

  ascii-edge a.png b.jpg --output-dir out -t 0.1
    Batch mode; failing files are reported and skipped
""",
    )

    parser.add_argument("inputs", nargs="+", help="Input image(s)")
    parser.add_argument("--output", "-o", default=None,
                        help="Output image path (single input only)")
    parser.add_argument("--output-dir", default=None,
                        help="Directory for outputs (default: next to each input)")
    parser.add_argument("--threshold", "-t", type=parse_threshold, default=0.0,
                        help="Edge density gate between 0 and 1 (default: 0)")
    parser.add_argument("--cell-size", "-c", type=int, default=4,
                        help="Cell size in pixels (default: 4)")
    parser.add_argument("--font", "-f", default=None,
                        help="TrueType font file (default: bundled font)")
    parser.add_argument("--charset", choices=list_charsets(), default="default",
                        help="Tile character set (default: default)")
    parser.add_argument("--tile-filters", default="",
                        help=f"Comma separated tile filters from {list(FILTERS)}")
    parser.add_argument("--edge-filters", default=DEFAULT_EDGE_FILTERS,
                        help=f"Comma separated edge filters (default: {DEFAULT_EDGE_FILTERS})")
    parser.add_argument("--no-edge-filters", action="store_true",
                        help="Detect edges on the unfiltered image")
    parser.add_argument("--color", action="store_true",
                        help="Color glyphs from the source image")
    parser.add_argument("--bg", type=parse_color, default=0,
                        help="Background color, N or R,G,B (default: 0)")
    parser.add_argument("--fg", type=parse_color, default=255,
                        help="Glyph color, N or R,G,B (default: 255)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Worker threads (default: automatic)")
    parser.add_argument("--print", dest="print_text", action="store_true",
                        help="Print the character grid")
    parser.add_argument("--stats", action="store_true",
                        help="Print grid statistics and SSIM against the source")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def build_config(args: argparse.Namespace) -> ConverterConfig:
    edge_names = [] if args.no_edge_filters else args.edge_filters.split(',')
    return ConverterConfig(
        font_settings=FontSettings(args.cell_size, args.font),
        charset=get_charset(args.charset),
        tile_filters=build_chain(args.tile_filters.split(',')),
        edge_filters=build_chain(edge_names),
        background=args.bg,
        foreground=args.fg,
        sample_colors=args.color,
        workers=args.workers,
    )


def report(item: BatchItem, print_text: bool, stats: bool):
    if not item.ok:
        print(f"❌ {item.input_path}: {item.error}")
        return

    result = item.result
    print(f"✅ {item.input_path} -> {item.output_path} ({result.width}x{result.height} cells)")
    if print_text:
        result.display()
    if stats:
        for key, value in result.get_stats().items():
            print(f"   {key}: {value}")
        top = list(character_distribution(result.grid).items())[:5]
        print(f"   top characters: {top}")
        source = result.source_image
        if source is not None:
            print(f"   ssim: {compute_ssim(result.image, source):.4f}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.output and len(args.inputs) > 1:
        parser.error("--output works with a single input; use --output-dir for batches")
    if args.cell_size < 1:
        parser.error("--cell-size must be at least 1")
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    setup_logging(args.verbose)

    try:
        config = build_config(args)
    except ValueError as err:
        parser.error(str(err))

    converter = Converter(config)
    batch = BatchConverter(converter)

    if args.output:
        items = [batch.convert_one(args.inputs[0], args.output, args.threshold)]
    else:
        items = batch.process_files(args.inputs, args.output_dir, args.threshold)

    for item in items:
        report(item, args.print_text, args.stats)

    failed = [item for item in items if not item.ok]
    if len(items) > 1:
        print(f"\n{len(items) - len(failed)} converted, {len(failed)} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
