"""
Core modules for the image pipeline
"""

from .enums import CanvasFill, ColorMode, FlipAxis, ImageFormat, OrientationOp, RotationAngle
from .exceptions import (
    DecodeFailure,
    EncodeFailure,
    ImageError,
    ImageFileNotFound,
    InvalidDimensions,
    InvalidInput,
    InvalidOrientation,
    UnsupportedFormat,
)

__all__ = [
    "CanvasFill",
    "ColorMode",
    "FlipAxis",
    "ImageFormat",
    "OrientationOp",
    "RotationAngle",
    "ImageError",
    "ImageFileNotFound",
    "UnsupportedFormat",
    "InvalidInput",
    "InvalidOrientation",
    "InvalidDimensions",
    "DecodeFailure",
    "EncodeFailure",
]
