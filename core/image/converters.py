"""
Image format conversion utilities.

Handles conversions between the representations the pipeline touches:
- Encoded bytes (JPEG, PNG, GIF)
- PIL Images
- PixelBuffer (RGBA NumPy array)
- Base64 data URIs
"""

import base64
import io
import logging
from typing import Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from core.constants import ImageConstants
from core.enums import FORMAT_ALIASES, ImageFormat
from core.exceptions import DecodeFailure, EncodeFailure, UnsupportedFormat
from core.image.buffer import PixelBuffer

logger = logging.getLogger(__name__)

_PIL_FORMATS = {fmt.pil_format: fmt for fmt in ImageFormat}


class ImageConverters:
    """Utilities for converting between image representations."""

    @staticmethod
    def pil_to_buffer(image: Image.Image) -> PixelBuffer:
        """
        Convert PIL Image to PixelBuffer.

        Args:
            image: PIL Image in any mode

        Returns:
            PixelBuffer in RGBA layout
        """
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return PixelBuffer(np.array(image, dtype=np.uint8))

    @staticmethod
    def buffer_to_pil(buffer: PixelBuffer, image_format: Optional[ImageFormat] = None) -> Image.Image:
        """
        Convert PixelBuffer to PIL Image.

        Args:
            buffer: Source buffer
            image_format: Target format; JPEG drops the alpha channel

        Returns:
            PIL Image
        """
        image = Image.fromarray(buffer.to_array())
        if image_format is ImageFormat.JPEG:
            image = image.convert("RGB")
        return image

    @staticmethod
    def parse_format(value: Union[ImageFormat, str]) -> ImageFormat:
        """
        Resolve a format from an enum, extension or mime type.

        Raises:
            UnsupportedFormat: If the value does not name a supported format
        """
        if isinstance(value, ImageFormat):
            return value
        if isinstance(value, str):
            fmt = FORMAT_ALIASES.get(value.strip().lower().lstrip("."))
            if fmt is not None:
                return fmt
        raise UnsupportedFormat(f"Format not supported: {value!r}")

    @staticmethod
    def detect_format(data: bytes) -> ImageFormat:
        """
        Identify the format of encoded image bytes from their header.

        Raises:
            UnsupportedFormat: If the bytes are not JPEG, PNG or GIF
        """
        try:
            with Image.open(io.BytesIO(data)) as image:
                pil_format = image.format
        except (UnidentifiedImageError, OSError) as e:
            raise UnsupportedFormat(f"Filetype not supported: {e}") from e

        fmt = _PIL_FORMATS.get(pil_format)
        if fmt is None:
            raise UnsupportedFormat(f"Filetype not supported: {pil_format}")
        return fmt

    @staticmethod
    def decode(data: bytes, format_hint: Optional[ImageFormat] = None) -> PixelBuffer:
        """
        Decode image bytes into a PixelBuffer.

        Only the first frame of animated images is decoded. EXIF orientation is
        not applied here.

        Args:
            data: Encoded image bytes
            format_hint: Expected format; a mismatch is a decode failure

        Returns:
            Decoded PixelBuffer

        Raises:
            DecodeFailure: If the codec rejects the bytes
        """
        try:
            with Image.open(io.BytesIO(data)) as image:
                if format_hint is not None and image.format != format_hint.pil_format:
                    raise DecodeFailure(
                        f"Expected {format_hint.pil_format} data, got {image.format}"
                    )
                image.load()
                return ImageConverters.pil_to_buffer(image)
        except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
            logger.error(f"Failed to decode image: {e}")
            raise DecodeFailure(f"Error opening file: {e}") from e

    @staticmethod
    def encode(buffer: PixelBuffer, image_format: ImageFormat) -> bytes:
        """
        Encode a PixelBuffer with the fixed quality settings for the format.

        Args:
            buffer: Buffer to encode
            image_format: Target format

        Returns:
            Encoded bytes
        """
        image = ImageConverters.buffer_to_pil(buffer, image_format)
        save_kwargs = {"format": image_format.pil_format}

        if image_format is ImageFormat.JPEG:
            save_kwargs["quality"] = ImageConstants.JPEG_QUALITY
        elif image_format is ImageFormat.PNG:
            save_kwargs["compress_level"] = ImageConstants.PNG_COMPRESS_LEVEL

        try:
            output = io.BytesIO()
            image.save(output, **save_kwargs)
            return output.getvalue()
        except (OSError, ValueError) as e:
            logger.error(f"Failed to encode image as {image_format.pil_format}: {e}")
            raise EncodeFailure(f"Failed to encode image: {e}") from e

    @staticmethod
    def to_base64(data: bytes) -> str:
        """Base64-encode raw image bytes."""
        return base64.b64encode(data).decode("utf-8")

    @staticmethod
    def to_data_uri(data: bytes, image_format: ImageFormat) -> str:
        """Build a data URI for encoded image bytes."""
        return f"data:{image_format.mime_type};base64,{ImageConverters.to_base64(data)}"


# Convenience aliases for direct imports
pil_to_buffer = ImageConverters.pil_to_buffer
buffer_to_pil = ImageConverters.buffer_to_pil
parse_format = ImageConverters.parse_format
detect_format = ImageConverters.detect_format
decode = ImageConverters.decode
encode = ImageConverters.encode
