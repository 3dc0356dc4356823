"""
Image processing utilities - modular architecture.

This package provides focused image utilities:
- buffer: RGBA pixel buffer and its copy/resample primitives
- converters: Codec and format conversions (bytes, PIL, base64)
- exif: EXIF metadata reading and orientation rewriting
- orientation: EXIF orientation code to corrective operations
- geometry: Flip, rotate, crop, canvas expansion
- processors: Bounding-box fit and resampling
"""

from core.image.buffer import PixelBuffer
from core.image.converters import ImageConverters
from core.image.exif import ExifMetadata
from core.image.geometry import ImageGeometry
from core.image.processors import ImageProcessors

__all__ = ["PixelBuffer", "ImageConverters", "ExifMetadata", "ImageGeometry", "ImageProcessors"]
