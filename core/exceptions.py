"""
Error taxonomy for the image pipeline.

Every error carries a numeric code so callers embedding the pipeline in a
service can map failures to a response status without string matching.
"""


class ImageError(Exception):
    """Base class for all image pipeline errors."""

    code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ImageFileNotFound(ImageError, FileNotFoundError):
    """Source file does not exist."""

    code = 404


class UnsupportedFormat(ImageError):
    """Unknown source format or unsupported conversion target."""

    code = 501


class InvalidInput(ImageError, ValueError):
    """Bad numeric parameter or argument type."""

    code = 400


class InvalidOrientation(InvalidInput):
    """EXIF orientation code outside 1-8."""


class InvalidDimensions(InvalidInput):
    """Zero or negative width/height for a new buffer."""


class DecodeFailure(ImageError):
    """Bytes are present but the codec rejects them."""

    code = 400


class EncodeFailure(ImageError):
    """Codec failed to encode the current buffer."""

    code = 500
