"""
In-memory RGBA pixel buffer.

Wraps a NumPy array of shape (height, width, 4) and provides the primitives
the geometry and resize operations are built from:
- Allocation with a background fill
- Pixel read/write
- Flip (index reversal)
- Sub-rectangle copy with resampling
- Clipped 1:1 paste
"""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from core.constants import ImageConstants
from core.enums import FlipAxis
from core.exceptions import InvalidDimensions, InvalidInput

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]
Rect = Tuple[int, int, int, int]

# cv2.flip codes
_FLIP_CODES = {
    FlipAxis.HORIZONTAL: 1,
    FlipAxis.VERTICAL: 0,
    FlipAxis.BOTH: -1,
}


class PixelBuffer:
    """Rectangular grid of RGBA pixels."""

    __hash__ = None

    def __init__(self, pixels: np.ndarray):
        """
        Initialize buffer from an array.

        Args:
            pixels: uint8 array of shape (height, width, 4)

        Raises:
            InvalidDimensions: If the array is empty
            InvalidInput: If the array is not an RGBA uint8 grid
        """
        if not isinstance(pixels, np.ndarray):
            raise InvalidInput(f"Pixels must be a NumPy array, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] != ImageConstants.CHANNELS:
            raise InvalidInput(f"Pixels must have shape (height, width, 4), got {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise InvalidInput(f"Pixels must be uint8, got {pixels.dtype}")
        if pixels.shape[0] <= 0 or pixels.shape[1] <= 0:
            raise InvalidDimensions(f"Buffer must not be empty, got {pixels.shape[1]}x{pixels.shape[0]}")

        self._pixels = np.ascontiguousarray(pixels)

    @classmethod
    def blank(cls, width: int, height: int, fill: RGBA) -> "PixelBuffer":
        """
        Allocate a new buffer filled with a single color.

        Args:
            width: Buffer width in pixels
            height: Buffer height in pixels
            fill: RGBA fill color

        Returns:
            New PixelBuffer
        """
        validate_dimensions(width, height)
        pixels = np.empty((height, width, ImageConstants.CHANNELS), dtype=np.uint8)
        pixels[:, :] = fill
        return cls(pixels)

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) tuple."""
        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        view = self._pixels.view()
        view.flags.writeable = False
        return view

    def copy(self) -> "PixelBuffer":
        """Deep copy; the new buffer shares no memory with this one."""
        return PixelBuffer(self._pixels.copy())

    def get_pixel(self, x: int, y: int) -> RGBA:
        self._check_point(x, y)
        return tuple(int(c) for c in self._pixels[y, x])

    def set_pixel(self, x: int, y: int, color: RGBA) -> None:
        self._check_point(x, y)
        self._pixels[y, x] = color

    def fill(self, color: RGBA, rect: Optional[Rect] = None) -> None:
        """
        Fill the whole buffer, or a rectangle clipped to the buffer, with a color.

        Args:
            color: RGBA color
            rect: Optional (x, y, width, height) rectangle
        """
        if rect is None:
            self._pixels[:, :] = color
            return

        x, y, w, h = rect
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + w, self.width), min(y + h, self.height)
        if x1 > x0 and y1 > y0:
            self._pixels[y0:y1, x0:x1] = color

    def flipped(self, axis: FlipAxis) -> "PixelBuffer":
        """Return a reflected copy of this buffer."""
        return PixelBuffer(cv2.flip(self._pixels, _FLIP_CODES[FlipAxis(axis)]))

    def paste(self, source: "PixelBuffer", x: int, y: int) -> None:
        """
        Copy source pixels 1:1 with the top-left corner at (x, y).

        Parts of the source that fall outside this buffer are clipped.
        """
        self._paste_array(source._pixels, x, y)

    def resample_from(self, source: "PixelBuffer", dst: Rect, src: Rect) -> None:
        """
        Copy a source rectangle into a destination rectangle of this buffer,
        scaling with smooth interpolation when the sizes differ.

        Source areas outside the source buffer are not read; the destination
        pixels they map to keep their current (background) value.

        Args:
            source: Buffer to read from
            dst: Destination (x, y, width, height) in this buffer
            src: Source (x, y, width, height) in the source buffer
        """
        dx, dy, dw, dh = dst
        sx, sy, sw, sh = src
        validate_dimensions(dw, dh)
        validate_dimensions(sw, sh)

        # Clip source rectangle to source bounds
        x0, y0 = max(sx, 0), max(sy, 0)
        x1, y1 = min(sx + sw, source.width), min(sy + sh, source.height)
        if x1 <= x0 or y1 <= y0:
            logger.debug(f"Source rectangle {src} lies outside {source.width}x{source.height}")
            return

        scale_x = dw / sw
        scale_y = dh / sh

        # Destination rectangle covered by the readable part of the source
        tx0 = dx + int(round((x0 - sx) * scale_x))
        ty0 = dy + int(round((y0 - sy) * scale_y))
        tx1 = dx + int(round((x1 - sx) * scale_x))
        ty1 = dy + int(round((y1 - sy) * scale_y))
        target_w, target_h = tx1 - tx0, ty1 - ty0
        if target_w <= 0 or target_h <= 0:
            return

        patch = source._pixels[y0:y1, x0:x1]
        if patch.shape[1] != target_w or patch.shape[0] != target_h:
            patch = resize_pixels(patch, target_w, target_h)

        self._paste_array(patch, tx0, ty0)

    def to_array(self) -> np.ndarray:
        """Return a writable copy of the pixel array."""
        return self._pixels.copy()

    def _paste_array(self, patch: np.ndarray, x: int, y: int) -> None:
        ph, pw = patch.shape[:2]
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + pw, self.width), min(y + ph, self.height)
        if x1 <= x0 or y1 <= y0:
            return
        self._pixels[y0:y1, x0:x1] = patch[y0 - y : y1 - y, x0 - x : x1 - x]

    def _check_point(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise InvalidInput(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"


def resize_pixels(pixels: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Resize an RGBA array with smooth interpolation.

    Uses area averaging when neither axis grows and bilinear interpolation
    otherwise. Color is weighted by alpha, so fully transparent pixels do not
    bleed into their opaque neighbours.
    """
    h, w = pixels.shape[:2]
    if width <= w and height <= h:
        interpolation = cv2.INTER_AREA
    else:
        interpolation = cv2.INTER_LINEAR

    pixels = np.ascontiguousarray(pixels)
    alpha = pixels[:, :, 3:4]
    if np.all(alpha == 255):
        return cv2.resize(pixels, (width, height), interpolation=interpolation)

    # Premultiply, resize, then divide back out where anything is visible
    alpha = alpha.astype(np.float32)
    premultiplied = np.concatenate([pixels[:, :, :3] * (alpha / 255.0), alpha], axis=2)
    resized = cv2.resize(premultiplied, (width, height), interpolation=interpolation)

    out_alpha = resized[:, :, 3:4]
    rgb = np.where(out_alpha > 0, resized[:, :, :3] * 255.0 / np.maximum(out_alpha, 1e-6), 0.0)
    result = np.concatenate([rgb, out_alpha], axis=2)
    return np.clip(np.rint(result), 0, 255).astype(np.uint8)


def validate_dimensions(width: int, height: int) -> None:
    """Raise InvalidDimensions unless both values are positive integers."""
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidDimensions(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidDimensions(f"{name} must be positive, got {value}")
