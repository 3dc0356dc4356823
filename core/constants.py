"""
Constants and configuration values for the image pipeline.
Centralizes all magic numbers and configuration constants.
"""


# Image Encoding Constants
class ImageConstants:
    """Constants related to image encoding and metadata."""

    # Encoding (fixed, not user configurable)
    JPEG_QUALITY = 50
    PNG_COMPRESS_LEVEL = 9

    # EXIF orientation
    ORIENTATION_UPRIGHT = 1
    VALID_ORIENTATIONS = (1, 2, 3, 4, 5, 6, 7, 8)
    EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

    # Pixel layout
    CHANNELS = 4  # RGBA


# Color Constants (RGBA)
class Colors:
    """Standard fill colors (RGBA format)."""

    WHITE = (255, 255, 255, 255)
    TRANSPARENT = (255, 255, 255, 0)
    TRANSBLACK = (0, 0, 0, 94)  # Black at roughly 37% opacity


# System Constants
class SystemConstants:
    """Constants for system operations."""

    # Logging
    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Environment
    ENV_PREFIX = "IMAGE_PIPELINE_"
