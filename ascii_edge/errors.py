"""
Conversion Errors

Every failure raised by the pipeline derives from ConvertError so callers
can catch one type and still tell the categories apart:
- ImageError: decode/encode failures
- FileAccessError: missing or unreadable files
- ArrayShapeMismatchError: buffers whose dimensions don't line up
- InvalidFontError: font data unusable even after the fallback font
- ProcessingError: a pipeline stage got malformed input or parameters
"""


class ConvertError(Exception):
    """Base class for all conversion failures."""

    message = "Conversion failed"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


class ImageError(ConvertError):
    message = "Failed processing image"


class FileAccessError(ConvertError):
    message = "Failed reading file"


class ArrayShapeMismatchError(ConvertError):
    message = "Failed converting image to array with given shape or layout"


class InvalidFontError(ConvertError):
    message = "Failed reading font data"


class ProcessingError(ConvertError):
    message = "Could not process buffer"
