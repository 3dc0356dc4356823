"""
Tests for EXIF metadata handling
"""

import io
from datetime import datetime

import piexif
import pytest
from PIL import Image

from core.exceptions import InvalidOrientation
from core.image.exif import ExifMetadata, read_exif, read_orientation, rewrite_orientation


def _plain_jpeg(width=8, height=8):
    output = io.BytesIO()
    Image.new("RGB", (width, height), (0, 128, 255)).save(output, format="JPEG")
    return output.getvalue()


class TestLoad:
    """Test reading EXIF containers"""

    def test_orientation(self, make_jpeg):
        metadata = read_exif(make_jpeg(orientation=6))
        assert metadata is not None
        assert metadata.orientation == 6

    def test_no_exif(self, make_jpeg):
        """A JPEG without an EXIF segment has no container"""
        assert read_exif(make_jpeg()) is None

    def test_png_degrades_to_none(self, png_bytes):
        assert read_exif(png_bytes) is None

    def test_garbage_degrades_to_none(self):
        assert read_exif(b"\xff\xd8\xff\xe1\x00\x10Exif\x00\x00garbage") is None

    def test_out_of_range_orientation_is_ignored(self, make_jpeg):
        metadata = read_exif(make_jpeg(orientation=9))
        assert metadata is not None
        assert metadata.orientation is None

    def test_missing_orientation_tag(self, make_jpeg):
        metadata = read_exif(make_jpeg(zeroth={piexif.ImageIFD.Make: b"TestCam"}))
        assert metadata is not None
        assert metadata.orientation is None

    def test_read_orientation_shortcut(self, make_jpeg):
        assert read_orientation(make_jpeg(orientation=3)) == 3
        assert read_orientation(make_jpeg()) is None

    def test_unwritable_container_is_dropped(self, unwritable_exif_jpeg):
        assert read_exif(unwritable_exif_jpeg) is None

    def test_unwritable_container_keeps_orientation(self, unwritable_exif_jpeg):
        """A readable orientation survives even when the container is dropped"""
        assert read_orientation(unwritable_exif_jpeg) == 6


class TestOrientationTag:
    """Test updating the orientation tag"""

    def test_reset(self, make_jpeg):
        metadata = read_exif(make_jpeg(orientation=8))
        metadata.reset_orientation()
        assert metadata.orientation == 1

    def test_reset_creates_tag(self, make_jpeg):
        """Resetting adds the tag when the container lacks it"""
        metadata = read_exif(make_jpeg(zeroth={piexif.ImageIFD.Make: b"TestCam"}))
        metadata.reset_orientation()
        assert metadata.orientation == 1

    def test_set_invalid(self, make_jpeg):
        metadata = read_exif(make_jpeg(orientation=2))
        with pytest.raises(InvalidOrientation):
            metadata.set_orientation(0)
        assert metadata.orientation == 2

    def test_copy_is_independent(self, make_jpeg):
        metadata = read_exif(make_jpeg(orientation=5))
        duplicate = metadata.copy()
        duplicate.reset_orientation()
        assert metadata.orientation == 5


class TestFields:
    """Test named field access"""

    def test_as_dict(self, make_jpeg):
        metadata = read_exif(
            make_jpeg(orientation=1, zeroth={piexif.ImageIFD.Make: b"TestCam"})
        )
        fields = metadata.as_dict()
        assert fields["Make"] == "TestCam"
        assert fields["Orientation"] == 1

    def test_datetime_original(self, make_jpeg):
        metadata = read_exif(
            make_jpeg(exif_ifd={piexif.ExifIFD.DateTimeOriginal: b"2020:01:02 03:04:05"})
        )
        assert metadata.datetime_original == datetime(2020, 1, 2, 3, 4, 5)

    def test_bad_datetime(self, make_jpeg):
        metadata = read_exif(make_jpeg(exif_ifd={piexif.ExifIFD.DateTimeOriginal: b"yesterday"}))
        assert metadata.datetime_original is None


class TestWrite:
    """Test writing containers into JPEG bytes"""

    def test_insert_into(self, make_jpeg):
        metadata = read_exif(make_jpeg(orientation=6))
        metadata.reset_orientation()
        data = metadata.insert_into(_plain_jpeg())
        assert read_orientation(data) == 1
        with Image.open(io.BytesIO(data)) as image:
            assert image.size == (8, 8)

    def test_rewrite_orientation_without_exif(self):
        data = rewrite_orientation(_plain_jpeg(), 7)
        assert read_orientation(data) == 7

    def test_rewrite_orientation_replaces(self, make_jpeg):
        data = rewrite_orientation(make_jpeg(orientation=6), 1)
        assert read_orientation(data) == 1

    def test_rewrite_orientation_invalid(self, make_jpeg):
        with pytest.raises(InvalidOrientation):
            rewrite_orientation(make_jpeg(), 12)

    def test_dump_round_trips_through_load(self, make_jpeg):
        metadata = read_exif(make_jpeg(orientation=4))
        assert ExifMetadata.load(metadata.dump()).orientation == 4
