"""Convert many files with one converter; a failing file never stops the run."""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging
import os

from .converter import Converter
from .errors import ConvertError
from .result import ConversionResult


logger = logging.getLogger(__name__)


@dataclass
class BatchItem:
    input_path: str
    output_path: str
    result: Optional[ConversionResult] = None
    error: Optional[ConvertError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def output_path_for(input_path: str, output_dir: Optional[str] = None,
                    suffix: str = "_ascii", ext: Optional[str] = None) -> str:
    """
    Destination for an input: same stem plus suffix, in output_dir or next
    to the input. ext defaults to the input's extension.
    """
    stem, input_ext = os.path.splitext(os.path.basename(input_path))
    directory = output_dir if output_dir is not None else os.path.dirname(input_path)
    return os.path.join(directory, f"{stem}{suffix}{ext or input_ext}")


class BatchConverter:
    """Process multiple images with the same settings."""

    def __init__(self, converter: Optional[Converter] = None):
        self.converter = converter or Converter()

    def convert_one(self, input_path: str, output_path: str, sharpen_threshold: float = 0.0) -> BatchItem:
        """Convert one file, capturing a ConvertError instead of raising it."""
        item = BatchItem(input_path=input_path, output_path=output_path)
        try:
            item.result = self.converter.convert(input_path, output_path, sharpen_threshold)
        except ConvertError as err:
            logger.error("Error processing %s: %s", input_path, err)
            item.error = err
        return item

    def process_files(
        self,
        input_paths: Sequence[str],
        output_dir: Optional[str] = None,
        sharpen_threshold: float = 0.0,
        suffix: str = "_ascii",
        ext: Optional[str] = None,
    ) -> List[BatchItem]:
        """
        Convert each input in turn.

        Args:
            input_paths: Source images
            output_dir: Where outputs go (None = next to each input)
            sharpen_threshold: Density gate for edge cells
            suffix: Appended to each output stem
            ext: Output extension such as ".png" (None = keep input's)

        Returns:
            One BatchItem per input, in input order
        """
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)

        items = [
            self.convert_one(path, output_path_for(path, output_dir, suffix, ext), sharpen_threshold)
            for path in input_paths
        ]

        failed = sum(1 for item in items if not item.ok)
        logger.info("Batch finished: %d converted, %d failed", len(items) - failed, failed)
        return items
