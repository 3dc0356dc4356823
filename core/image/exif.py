"""
EXIF metadata handling.

Reads the EXIF container from JPEG bytes, exposes the orientation tag and
writes the (corrected) container back into re-encoded JPEG bytes.

Malformed or missing EXIF never fails an image load; it degrades to "no
metadata".
"""

import copy
import io
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import piexif

from core.constants import ImageConstants
from core.image.orientation import validate_orientation

logger = logging.getLogger(__name__)

_IFD_NAMES = ("0th", "Exif", "GPS", "Interop", "1st")

# IFDs whose tags are reported by ExifMetadata.as_dict()
_REPORTED_IFDS = ("0th", "Exif")


class ExifMetadata:
    """Mutable EXIF container attached to a loaded JPEG."""

    def __init__(self, exif_dict: Dict[str, Any]):
        self._exif = exif_dict

    @classmethod
    def load(cls, data: bytes) -> Optional["ExifMetadata"]:
        """
        Parse EXIF from JPEG bytes.

        Args:
            data: Encoded JPEG bytes (or raw EXIF bytes)

        Returns:
            ExifMetadata, or None if there is no usable EXIF container
        """
        exif_dict = _parse(data)
        if exif_dict is None:
            return None

        # Containers that cannot be written back are not kept; their
        # orientation is still available through read_orientation()
        try:
            piexif.dump(exif_dict)
        except Exception as e:
            logger.warning(f"Dropping EXIF container that cannot be rewritten. Reason: {e}")
            return None

        return cls(exif_dict)

    @property
    def orientation(self) -> Optional[int]:
        """Orientation code 1-8, or None if the tag is absent or out of range."""
        return _orientation_of(self._exif)

    def set_orientation(self, orientation: int) -> None:
        """Set (or create) the IFD0 orientation tag."""
        self._exif.setdefault("0th", {})[piexif.ImageIFD.Orientation] = validate_orientation(
            orientation
        )

    def reset_orientation(self) -> None:
        self.set_orientation(ImageConstants.ORIENTATION_UPRIGHT)

    @property
    def datetime_original(self) -> Optional[datetime]:
        """Capture time from DateTimeOriginal, falling back to IFD0 DateTime."""
        raw = self._exif.get("Exif", {}).get(piexif.ExifIFD.DateTimeOriginal)
        if raw is None:
            raw = self._exif.get("0th", {}).get(piexif.ImageIFD.DateTime)
        if raw is None:
            return None

        text = _decode_text(raw)
        try:
            return datetime.strptime(text, ImageConstants.EXIF_DATETIME_FORMAT)
        except ValueError:
            logger.debug(f"Unparseable EXIF datetime: {text!r}")
            return None

    def as_dict(self) -> Dict[str, Any]:
        """
        Named tags from IFD0 and the Exif IFD.

        Byte strings are decoded to text; other values are returned as stored.
        """
        result: Dict[str, Any] = {}
        for ifd in _REPORTED_IFDS:
            for tag, value in self._exif.get(ifd, {}).items():
                info = piexif.TAGS.get(ifd, {}).get(tag)
                if info is None:
                    continue
                result[info["name"]] = _decode_text(value) if isinstance(value, bytes) else value
        return result

    def dump(self) -> bytes:
        """Serialize to EXIF bytes."""
        return piexif.dump(self._exif)

    def insert_into(self, jpeg_data: bytes) -> bytes:
        """
        Attach this container to encoded JPEG bytes.

        Args:
            jpeg_data: JPEG bytes produced by the encoder

        Returns:
            JPEG bytes carrying this EXIF container
        """
        output = io.BytesIO()
        piexif.insert(self.dump(), jpeg_data, output)
        return output.getvalue()

    def copy(self) -> "ExifMetadata":
        return ExifMetadata(copy.deepcopy(self._exif))

    def __repr__(self) -> str:
        return f"ExifMetadata(orientation={self.orientation})"


def read_exif(data: bytes) -> Optional[ExifMetadata]:
    """Module-level shortcut for ExifMetadata.load()."""
    return ExifMetadata.load(data)


def read_orientation(data: bytes) -> Optional[int]:
    """
    Orientation code from JPEG bytes, or None when absent.

    Only needs the EXIF to be readable; containers ExifMetadata.load() drops
    because they cannot be rewritten still report their orientation.
    """
    exif_dict = _parse(data)
    return _orientation_of(exif_dict) if exif_dict is not None else None


def rewrite_orientation(data: bytes, orientation: int) -> bytes:
    """
    Return JPEG bytes with the IFD0 orientation tag set to the given code.

    A new EXIF container is created when the image has none.

    Raises:
        InvalidOrientation: If the code is not 1-8
    """
    metadata = ExifMetadata.load(data) or ExifMetadata({"0th": {}})
    metadata.set_orientation(orientation)
    return metadata.insert_into(data)


def _parse(data: bytes) -> Optional[Dict[str, Any]]:
    """piexif dict for the bytes, or None if there is no readable EXIF."""
    try:
        exif_dict = piexif.load(data)
    except Exception as e:
        logger.warning(f"Problem getting exif information. Reason: {e}")
        return None

    if not any(exif_dict.get(ifd) for ifd in _IFD_NAMES) and not exif_dict.get("thumbnail"):
        return None
    return exif_dict


def _orientation_of(exif_dict: Dict[str, Any]) -> Optional[int]:
    value = exif_dict.get("0th", {}).get(piexif.ImageIFD.Orientation)
    if isinstance(value, int) and value in ImageConstants.VALID_ORIENTATIONS:
        return value
    if value is not None:
        logger.debug(f"Ignoring invalid EXIF orientation value: {value!r}")
    return None


def _decode_text(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").rstrip("\x00").strip()
    return value
