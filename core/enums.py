"""
Centralized enums for the image pipeline.

All format-dependent decisions (fill policy, extension, codec name) are made
from these closed enums so that an unknown value can never fall through.
"""

from enum import Enum
from typing import Tuple

from core.constants import Colors


class ColorMode(str, Enum):
    """Background policy for newly allocated pixel regions."""

    OPAQUE = "opaque"
    TRANSPARENT = "transparent"

    @property
    def fill(self) -> Tuple[int, int, int, int]:
        """RGBA value used to fill new regions."""
        return _COLOR_MODE_FILL[self]


_COLOR_MODE_FILL = {
    ColorMode.OPAQUE: Colors.WHITE,
    ColorMode.TRANSPARENT: Colors.TRANSPARENT,
}


class ImageFormat(str, Enum):
    """Supported raster formats, keyed by mime type."""

    JPEG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"

    @property
    def mime_type(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        return _FORMAT_EXTENSION[self]

    @property
    def pil_format(self) -> str:
        """Format name understood by Pillow."""
        return self.name

    @property
    def color_mode(self) -> ColorMode:
        # GIF transparency is not modelled; it shares the JPEG white fill.
        return _FORMAT_COLOR_MODE[self]


_FORMAT_EXTENSION = {
    ImageFormat.JPEG: "jpg",
    ImageFormat.PNG: "png",
    ImageFormat.GIF: "gif",
}

_FORMAT_COLOR_MODE = {
    ImageFormat.JPEG: ColorMode.OPAQUE,
    ImageFormat.PNG: ColorMode.TRANSPARENT,
    ImageFormat.GIF: ColorMode.OPAQUE,
}

# Aliases accepted when a format is given as a string
FORMAT_ALIASES = {
    "jpg": ImageFormat.JPEG,
    "jpeg": ImageFormat.JPEG,
    "png": ImageFormat.PNG,
    "gif": ImageFormat.GIF,
    "image/jpeg": ImageFormat.JPEG,
    "image/png": ImageFormat.PNG,
    "image/gif": ImageFormat.GIF,
}


class FlipAxis(str, Enum):
    """Axis (or axes) to reflect pixels across."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


class RotationAngle(int, Enum):
    """
    Quarter turns, expressed in counter-clockwise degrees.

    The rotate primitive turns counter-clockwise, so a clockwise quarter turn
    is the larger value.
    """

    CW90 = 270
    CCW90 = 90


class OrientationOp(str, Enum):
    """Corrective primitives used to bring an EXIF-oriented image upright."""

    FLIP_HORIZONTAL = "flip_horizontal"
    FLIP_VERTICAL = "flip_vertical"
    FLIP_BOTH = "flip_both"
    ROTATE_CW = "rotate_cw"
    ROTATE_CCW = "rotate_ccw"


class CanvasFill(str, Enum):
    """Fill options for canvas expansion."""

    FORMAT = "format"  # Follow the current format's ColorMode
    TRANSPARENT = "transparent"
    TRANSBLACK = "transblack"  # Black at roughly 37% opacity
