"""
Image processing operations.

Handles resize tasks:
- Fitting dimensions inside a bounding box
- Resampling to new dimensions
- Bounded resize (fit + resample)
"""

import logging
from typing import Optional, Tuple

from core.enums import ColorMode
from core.exceptions import InvalidInput
from core.image.buffer import PixelBuffer, validate_dimensions

logger = logging.getLogger(__name__)


class ImageProcessors:
    """Resize operations for pixel buffers."""

    @staticmethod
    def fit_within(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
        """
        Calculate the largest size that fits a bounding box while keeping the
        aspect ratio.

        A bound of 0 means "unbounded" on that axis; (0, 0) keeps the original
        size. Fractional results are truncated toward zero.

        Args:
            width: Current width
            height: Current height
            max_width: Maximum width, 0 for unbounded
            max_height: Maximum height, 0 for unbounded

        Returns:
            Tuple of (new_width, new_height)
        """
        if max_width == 0 and max_height == 0:
            return width, height

        aspect = width / height

        if max_width == 0:
            # Unlimited width
            new_height = max_height
            new_width = max_height * aspect
        elif max_height == 0:
            # Unlimited height
            new_width = max_width
            new_height = max_width / aspect
        elif aspect < 1:
            # Portrait
            new_height = max_height
            new_width = new_height * aspect
            if new_width > max_width:
                new_width = max_width
                new_height = max_width / aspect
        elif aspect > 1:
            # Landscape
            new_width = max_width
            new_height = max_width / aspect
            if new_height > max_height:
                new_height = max_height
                new_width = max_height * aspect
        else:
            # Square
            new_width = new_height = min(max_width, max_height)

        return int(new_width), int(new_height)

    @staticmethod
    def resample(
        buffer: PixelBuffer,
        width: int,
        height: int,
        color_mode: ColorMode = ColorMode.OPAQUE,
    ) -> PixelBuffer:
        """
        Scale the whole buffer to width x height.

        Args:
            buffer: Input buffer
            width: Target width
            height: Target height
            color_mode: Background policy for the new buffer

        Returns:
            Resampled buffer
        """
        validate_dimensions(width, height)

        resized = PixelBuffer.blank(width, height, ColorMode(color_mode).fill)
        resized.resample_from(buffer, (0, 0, width, height), (0, 0, buffer.width, buffer.height))
        return resized

    @staticmethod
    def bounded_resize(
        buffer: PixelBuffer,
        max_width: Optional[int],
        max_height: Optional[int],
        color_mode: ColorMode = ColorMode.OPAQUE,
    ) -> PixelBuffer:
        """
        Resize into a bounding box while maintaining aspect ratio.

        Args:
            buffer: Input buffer
            max_width: Maximum width in pixels, 0 or None for unlimited
            max_height: Maximum height in pixels, 0 or None for unlimited
            color_mode: Background policy for the new buffer

        Returns:
            Resized buffer

        Raises:
            InvalidInput: If a bound is not a non-negative integer
        """
        max_width = _validate_bound("max_width", max_width)
        max_height = _validate_bound("max_height", max_height)

        new_width, new_height = ImageProcessors.fit_within(
            buffer.width, buffer.height, max_width, max_height
        )
        # Extreme aspect ratios can truncate to zero
        new_width, new_height = max(new_width, 1), max(new_height, 1)

        logger.debug(
            f"Bounded resize {buffer.width}x{buffer.height} into {max_width}x{max_height} "
            f"-> {new_width}x{new_height}"
        )
        return ImageProcessors.resample(buffer, new_width, new_height, color_mode)


def _validate_bound(name: str, value: Optional[int]) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInput(f"Both max_width and max_height must be non-negative integers, got {name}={value!r}")
    return int(value)


# Convenience aliases for direct imports
fit_within = ImageProcessors.fit_within
resample = ImageProcessors.resample
bounded_resize = ImageProcessors.bounded_resize
