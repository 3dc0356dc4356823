"""
Geometric operations on pixel buffers.

Handles:
- Flip (horizontal, vertical, both)
- Rotation by quarter turns
- Crop with background fill
- Canvas expansion
- Applying EXIF orientation corrections

Every operation returns a new PixelBuffer and leaves its input untouched.
"""

import logging
from typing import Iterable, Tuple, Union

import cv2

from core.enums import ColorMode, FlipAxis, OrientationOp, RotationAngle
from core.exceptions import InvalidInput
from core.image.buffer import PixelBuffer, validate_dimensions

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]

# Rotation by counter-clockwise degrees
_ROTATE_CODES = {
    90: cv2.ROTATE_90_COUNTERCLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_CLOCKWISE,
}


class ImageGeometry:
    """Pixel-buffer geometry operations."""

    @staticmethod
    def flip(buffer: PixelBuffer, axis: Union[FlipAxis, str]) -> PixelBuffer:
        """
        Reflect pixels across an axis.

        Args:
            buffer: Input buffer
            axis: FlipAxis (or its string value)

        Returns:
            Flipped buffer

        Raises:
            InvalidInput: If axis is not a FlipAxis
        """
        try:
            axis = FlipAxis(axis)
        except ValueError as e:
            raise InvalidInput(f"Please use one of the FlipAxis values, got {axis!r}") from e

        return buffer.flipped(axis)

    @staticmethod
    def rotate(buffer: PixelBuffer, degrees: Union[RotationAngle, int]) -> PixelBuffer:
        """
        Rotate counter-clockwise by a multiple of 90 degrees.

        RotationAngle.CW90 (270) turns clockwise, RotationAngle.CCW90 (90)
        counter-clockwise. Rotation is a pixel permutation, so opposite
        rotations restore the input exactly.

        Args:
            buffer: Input buffer
            degrees: Counter-clockwise degrees, multiple of 90

        Returns:
            Rotated buffer
        """
        if isinstance(degrees, bool) or not isinstance(degrees, int):
            raise InvalidInput(f"Rotation must be an integer number of degrees, got {degrees!r}")
        if degrees % 90 != 0:
            raise InvalidInput(f"Rotation must be a multiple of 90 degrees, got {degrees}")

        normalized = int(degrees) % 360
        if normalized == 0:
            return buffer.copy()

        return PixelBuffer(cv2.rotate(buffer.to_array(), _ROTATE_CODES[normalized]))

    @staticmethod
    def crop(
        buffer: PixelBuffer,
        x: int,
        y: int,
        width: int,
        height: int,
        color_mode: ColorMode = ColorMode.OPAQUE,
    ) -> PixelBuffer:
        """
        Cut a width x height rectangle starting at (x, y).

        The rectangle may extend past the buffer; those areas are filled with
        the color mode's background.

        Args:
            buffer: Input buffer
            x: Left edge of the crop box
            y: Top edge of the crop box
            width: Crop box width
            height: Crop box height
            color_mode: Background policy for uncovered pixels

        Returns:
            Cropped buffer

        Raises:
            InvalidDimensions: If width or height is not a positive integer
        """
        validate_dimensions(width, height)
        for name, value in (("x", x), ("y", y)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInput(f"Crop {name} must be an integer, got {value!r}")

        cropped = PixelBuffer.blank(width, height, ColorMode(color_mode).fill)
        cropped.resample_from(buffer, (0, 0, width, height), (x, y, width, height))

        logger.debug(f"Cropped {buffer.width}x{buffer.height} at ({x}, {y}) to {width}x{height}")
        return cropped

    @staticmethod
    def expand_canvas(buffer: PixelBuffer, width: int, height: int, fill: RGBA) -> PixelBuffer:
        """
        Place the buffer centered on a new width x height canvas.

        On an axis where the new size is not larger the offset is zero and the
        overhang is clipped. Pixels are copied 1:1, never resampled.

        Args:
            buffer: Input buffer
            width: New canvas width
            height: New canvas height
            fill: RGBA color for the whole new canvas

        Returns:
            Expanded buffer
        """
        validate_dimensions(width, height)

        canvas = PixelBuffer.blank(width, height, fill)
        dst_x = (width - buffer.width) // 2 if width > buffer.width else 0
        dst_y = (height - buffer.height) // 2 if height > buffer.height else 0
        canvas.paste(buffer, dst_x, dst_y)

        return canvas

    @staticmethod
    def apply_orientation_ops(buffer: PixelBuffer, ops: Iterable[OrientationOp]) -> PixelBuffer:
        """
        Apply corrective orientation operations in order.

        Args:
            buffer: Input buffer
            ops: Operations from orientation.resolve()

        Returns:
            Corrected buffer (a copy when ops is empty)
        """
        result = buffer
        for op in ops:
            op = OrientationOp(op)
            if op is OrientationOp.FLIP_HORIZONTAL:
                result = ImageGeometry.flip(result, FlipAxis.HORIZONTAL)
            elif op is OrientationOp.FLIP_VERTICAL:
                result = ImageGeometry.flip(result, FlipAxis.VERTICAL)
            elif op is OrientationOp.FLIP_BOTH:
                result = ImageGeometry.flip(result, FlipAxis.BOTH)
            elif op is OrientationOp.ROTATE_CW:
                result = ImageGeometry.rotate(result, RotationAngle.CW90)
            elif op is OrientationOp.ROTATE_CCW:
                result = ImageGeometry.rotate(result, RotationAngle.CCW90)

        return result if result is not buffer else buffer.copy()


# Convenience aliases for direct imports
flip = ImageGeometry.flip
rotate = ImageGeometry.rotate
crop = ImageGeometry.crop
expand_canvas = ImageGeometry.expand_canvas
apply_orientation_ops = ImageGeometry.apply_orientation_ops
