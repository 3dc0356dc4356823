"""
Pytest configuration and fixtures for image pipeline tests
"""

import io
import struct

import numpy as np
import piexif
import pytest
from PIL import Image

from config import get_settings
from core.image.buffer import PixelBuffer

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Rebuild settings around each test so env overrides do not leak"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_buffer():
    """Factory for buffers where every pixel has a distinct color"""

    def _make(width=4, height=3):
        pixels = np.zeros((height, width, 4), dtype=np.uint8)
        for y in range(height):
            for x in range(width):
                pixels[y, x] = ((x * 16) % 256, (y * 16) % 256, (x * 7 + y * 3) % 256, 255)
        return PixelBuffer(pixels)

    return _make


@pytest.fixture
def pattern_buffer(make_buffer):
    """4x3 buffer with distinct pixels"""
    return make_buffer(4, 3)


@pytest.fixture
def banded_buffer():
    """
    200x100 buffer: red left band (50px), green centre (100px), blue right
    band (50px)
    """
    pixels = np.zeros((100, 200, 4), dtype=np.uint8)
    pixels[:, :50] = RED
    pixels[:, 50:150] = GREEN
    pixels[:, 150:] = BLUE
    return PixelBuffer(pixels)


@pytest.fixture
def make_jpeg():
    """Factory for JPEG bytes with optional EXIF tags"""

    def _make(width=40, height=20, orientation=None, color=(200, 30, 30), zeroth=None, exif_ifd=None):
        exif_dict = {"0th": dict(zeroth or {}), "Exif": dict(exif_ifd or {})}
        if orientation is not None:
            exif_dict["0th"][piexif.ImageIFD.Orientation] = orientation

        save_kwargs = {"format": "JPEG", "quality": 95}
        if exif_dict["0th"] or exif_dict["Exif"]:
            save_kwargs["exif"] = piexif.dump(exif_dict)

        output = io.BytesIO()
        Image.new("RGB", (width, height), color).save(output, **save_kwargs)
        return output.getvalue()

    return _make


@pytest.fixture
def make_encoded():
    """Factory for encoding a PIL image in an arbitrary Pillow format"""

    def _make(image, pil_format="PNG"):
        output = io.BytesIO()
        image.save(output, format=pil_format)
        return output.getvalue()

    return _make


@pytest.fixture
def png_bytes(make_encoded):
    """30x10 semi-transparent PNG"""
    return make_encoded(Image.new("RGBA", (30, 10), (10, 20, 30, 128)), "PNG")


@pytest.fixture
def gif_bytes(make_encoded):
    """16x8 solid red GIF"""
    return make_encoded(Image.new("RGB", (16, 8), (255, 0, 0)), "GIF")


@pytest.fixture
def jpeg_file(tmp_path, make_jpeg):
    """40x20 JPEG on disk with EXIF orientation 6 and a camera make"""
    path = tmp_path / "photo.jpg"
    path.write_bytes(
        make_jpeg(
            40,
            20,
            orientation=6,
            zeroth={piexif.ImageIFD.Make: b"TestCam"},
            exif_ifd={piexif.ExifIFD.DateTimeOriginal: b"2020:01:02 03:04:05"},
        )
    )
    return path


@pytest.fixture
def unwritable_exif_jpeg():
    """
    40x20 JPEG with orientation 6 whose EXIF piexif can read but not dump.

    SceneType (41729) is stored as a SHORT instead of UNDEFINED, as some
    cameras write it.
    """
    exif_ifd_offset = 8 + 2 + 2 * 12 + 4
    tiff = b"MM\x00\x2a" + struct.pack(">I", 8)
    # IFD0: Orientation, pointer to the Exif IFD
    tiff += struct.pack(">H", 2)
    tiff += struct.pack(">HHIHH", piexif.ImageIFD.Orientation, 3, 1, 6, 0)
    tiff += struct.pack(">HHII", piexif.ImageIFD.ExifTag, 4, 1, exif_ifd_offset)
    tiff += struct.pack(">I", 0)
    # Exif IFD: SceneType as SHORT
    tiff += struct.pack(">H", 1)
    tiff += struct.pack(">HHIHH", piexif.ExifIFD.SceneType, 3, 1, 1, 0)
    tiff += struct.pack(">I", 0)

    output = io.BytesIO()
    Image.new("RGB", (40, 20), (200, 30, 30)).save(
        output, format="JPEG", quality=95, exif=b"Exif\x00\x00" + tiff
    )
    return output.getvalue()
