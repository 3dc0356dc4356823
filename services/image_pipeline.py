"""
Image Pipeline - Loads a single image, normalizes its EXIF orientation and
applies geometric transforms before re-encoding.

The pipeline exclusively owns its pixel buffer. Every operation computes a
new buffer first and only then replaces the held one, so a failed operation
leaves the image unchanged.
"""

import logging
import os
import sys
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, Tuple, Union

from config import get_settings
from core.constants import Colors, ImageConstants
from core.enums import CanvasFill, ColorMode, FlipAxis, ImageFormat, RotationAngle
from core.exceptions import ImageFileNotFound, InvalidDimensions, InvalidInput
from core.image.buffer import PixelBuffer
from core.image.converters import ImageConverters
from core.image.exif import ExifMetadata, read_orientation
from core.image.geometry import ImageGeometry
from core.image.orientation import resolve, validate_orientation
from core.image.processors import ImageProcessors
from core.utils.enum_converter import require_enum
from schemas import BoundingBox, CropRegion, Dimensions, FileInfo

logger = logging.getLogger(__name__)

PathType = Union[str, os.PathLike]

_CANVAS_FILL_COLORS = {
    CanvasFill.TRANSPARENT: Colors.TRANSPARENT,
    CanvasFill.TRANSBLACK: Colors.TRANSBLACK,
}


class ImagePipeline:
    """
    General image manipulation pipeline.

    Holds the current buffer, its format, the attached EXIF container (JPEG
    only) and the orientation still to be corrected.
    """

    def __init__(self, source: Union[PathType, "ImagePipeline"], load_exif: Optional[bool] = None):
        """
        Load an image.

        Args:
            source: Path to an image file, or another pipeline to copy
            load_exif: Whether to keep EXIF metadata for re-attachment on
                output. Defaults to the image.load_exif setting.

        Raises:
            InvalidInput: If source is neither a path nor a pipeline
            ImageFileNotFound: If the path does not exist
            UnsupportedFormat: If the file is not JPEG, PNG or GIF
            DecodeFailure: If the file cannot be decoded
        """
        if load_exif is None:
            load_exif = get_settings().image.load_exif

        if isinstance(source, ImagePipeline):
            self._load_from_pipeline(source, load_exif)
        elif isinstance(source, (str, os.PathLike)):
            self._load_from_file(source, load_exif)
        else:
            raise InvalidInput("source must be a filename or ImagePipeline")

    @classmethod
    def from_bytes(
        cls, data: bytes, filename: Optional[PathType] = None, load_exif: Optional[bool] = None
    ) -> "ImagePipeline":
        """
        Load an image from encoded bytes.

        Args:
            data: Encoded JPEG, PNG or GIF bytes
            filename: Optional filename used by save() and get_file_info()
            load_exif: See __init__
        """
        if load_exif is None:
            load_exif = get_settings().image.load_exif

        pipeline = cls.__new__(cls)
        pipeline._load_from_bytes(data, filename, load_exif)
        return pipeline

    @classmethod
    def from_buffer(
        cls,
        buffer: PixelBuffer,
        image_format: Union[ImageFormat, str] = ImageFormat.PNG,
        orientation: Optional[int] = None,
        exif: Optional[ExifMetadata] = None,
        filename: Optional[PathType] = None,
    ) -> "ImagePipeline":
        """
        Wrap an existing buffer. The buffer is copied.

        Args:
            buffer: Pixel data
            image_format: Output format
            orientation: Pending EXIF orientation code, if any
            exif: EXIF container to attach
            filename: Optional filename used by save()
        """
        if not isinstance(buffer, PixelBuffer):
            raise InvalidInput(f"buffer must be a PixelBuffer, got {type(buffer).__name__}")
        if orientation is not None:
            orientation = validate_orientation(orientation)

        pipeline = cls.__new__(cls)
        pipeline._set_state(
            buffer=buffer.copy(),
            image_format=ImageConverters.parse_format(image_format),
            exif=exif.copy() if exif is not None else None,
            orientation=orientation,
            filename=str(filename) if filename is not None else None,
        )
        return pipeline

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load_from_file(self, filename: PathType, load_exif: bool) -> None:
        path = Path(filename)
        if not path.is_file():
            raise ImageFileNotFound(f'File "{filename}" not found')

        self._load_from_bytes(path.read_bytes(), path, load_exif)

    def _load_from_bytes(self, data: bytes, filename: Optional[PathType], load_exif: bool) -> None:
        image_format = ImageConverters.detect_format(data)
        buffer = ImageConverters.decode(data, image_format)

        exif = None
        orientation = None
        if image_format is ImageFormat.JPEG:
            orientation = read_orientation(data)
            if load_exif:
                exif = ExifMetadata.load(data)

        self._set_state(
            buffer=buffer,
            image_format=image_format,
            exif=exif,
            orientation=orientation,
            filename=str(filename) if filename is not None else None,
        )
        logger.info(
            f"Loaded {image_format.pil_format} image {self._filename or '<bytes>'} "
            f"({buffer.width}x{buffer.height}, orientation={orientation})"
        )

    def _load_from_pipeline(self, other: "ImagePipeline", load_exif: bool) -> None:
        """Deep-copy another pipeline; later changes to either never affect the other."""
        exif = other._exif.copy() if (load_exif and other._exif is not None) else None
        self._set_state(
            buffer=other._buffer.copy(),
            image_format=other._format,
            exif=exif,
            orientation=other._orientation,
            filename=other._filename,
        )

    def _set_state(
        self,
        buffer: PixelBuffer,
        image_format: ImageFormat,
        exif: Optional[ExifMetadata],
        orientation: Optional[int],
        filename: Optional[str],
    ) -> None:
        self._buffer = buffer
        self._format = image_format
        self._exif = exif
        self._orientation = orientation
        self._filename = filename

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._buffer.width

    @property
    def height(self) -> int:
        return self._buffer.height

    @property
    def buffer(self) -> PixelBuffer:
        """Copy of the current pixel buffer."""
        return self._buffer.copy()

    @property
    def image_format(self) -> ImageFormat:
        return self._format

    @property
    def mime_type(self) -> str:
        return self._format.mime_type

    @property
    def color_mode(self) -> ColorMode:
        """Background policy derived from the current format."""
        return self._format.color_mode

    @property
    def orientation(self) -> Optional[int]:
        """Pending EXIF orientation code; 1 once corrected, None if unknown."""
        return self._orientation

    @property
    def exif(self) -> Optional[ExifMetadata]:
        """Copy of the attached EXIF container, if any."""
        return self._exif.copy() if self._exif is not None else None

    @property
    def filename(self) -> Optional[str]:
        return self._filename

    def get_dimensions(self) -> Dimensions:
        return Dimensions(width=self.width, height=self.height)

    def get_file_info(self) -> FileInfo:
        """Path, directory and basename of the source file."""
        if self._filename is None:
            return FileInfo()
        return FileInfo(
            file=self._filename,
            dir=os.path.dirname(self._filename),
            basename=os.path.basename(self._filename),
        )

    def get_info(self) -> Dict[str, Any]:
        """
        Image information: orientation, timestamp, filename and any named
        EXIF fields.
        """
        info: Dict[str, Any] = {}
        timestamp = None

        if self._exif is not None:
            info.update(self._exif.as_dict())
            taken = self._exif.datetime_original
            if taken is not None:
                timestamp = int(taken.timestamp())

        if timestamp is None:
            if self._filename is not None and os.path.exists(self._filename):
                timestamp = int(os.path.getmtime(self._filename))
            else:
                timestamp = int(time.time())

        info["orientation"] = self._orientation or ImageConstants.ORIENTATION_UPRIGHT
        info["timestamp"] = timestamp
        info["filename"] = os.path.basename(self._filename) if self._filename else None
        return info

    def get_extension(self) -> str:
        """File extension for the current format."""
        return self._format.extension

    def export(self) -> Dict[str, Any]:
        """
        Export pipeline state.

        Returns:
            Dict with 'filename', 'format', 'exif', 'orientation' and 'buffer'
            (all copies)
        """
        return {
            "filename": self._filename,
            "format": self._format,
            "exif": self.exif,
            "orientation": self._orientation,
            "buffer": self.buffer,
        }

    def copy(self) -> "ImagePipeline":
        """Independent deep copy of this pipeline."""
        return ImagePipeline(self, load_exif=True)

    def __copy__(self) -> "ImagePipeline":
        return self.copy()

    def __deepcopy__(self, memo: Dict[int, Any]) -> "ImagePipeline":
        return self.copy()

    def __repr__(self) -> str:
        return (
            f"ImagePipeline({self._format.pil_format} {self.width}x{self.height}, "
            f"orientation={self._orientation})"
        )

    # ------------------------------------------------------------------
    # Orientation
    # ------------------------------------------------------------------

    def transform_for_exif_orientation(self, orientation: int) -> None:
        """
        Orient the image upright for an EXIF orientation code and mark it as
        corrected.

        Args:
            orientation: EXIF orientation code 1-8

        Raises:
            InvalidOrientation: If the code is not 1-8
        """
        buffer = ImageGeometry.apply_orientation_ops(self._buffer, resolve(orientation))
        self._commit(buffer, orientation_fixed=True)
        logger.debug(f"Corrected orientation {orientation}")

    def fix_orientation(self) -> bool:
        """
        Apply the pending EXIF orientation, if any.

        Returns:
            True if the pixels were transformed
        """
        buffer, changed = self._oriented_buffer()
        if changed:
            self._commit(buffer, orientation_fixed=True)
        return changed

    def _oriented_buffer(self) -> Tuple[PixelBuffer, bool]:
        if self._orientation in (None, ImageConstants.ORIENTATION_UPRIGHT):
            return self._buffer, False
        return ImageGeometry.apply_orientation_ops(self._buffer, resolve(self._orientation)), True

    # ------------------------------------------------------------------
    # Geometric operations
    # ------------------------------------------------------------------

    def rotate(self, degrees: Union[RotationAngle, int]) -> None:
        """
        Rotate the image.

        Args:
            degrees: Counter-clockwise degrees, a multiple of 90.
                Use RotationAngle.CW90 / RotationAngle.CCW90 for quarter turns.
        """
        self._commit(ImageGeometry.rotate(self._buffer, degrees))

    def flip(self, axis: Union[FlipAxis, str]) -> None:
        """
        Flip the image.

        Args:
            axis: FlipAxis or one of "horizontal", "vertical", "both"
        """
        axis = require_enum(axis, FlipAxis, InvalidInput)
        self._commit(ImageGeometry.flip(self._buffer, axis))

    def crop(self, x: int, y: int, width: int, height: int) -> None:
        """
        Crop the image.

        Args:
            x: The x value of the top left corner of the crop box
            y: The y value of the top left corner of the crop box
            width: The width of the crop box
            height: The height of the crop box
        """
        self._commit(ImageGeometry.crop(self._buffer, x, y, width, height, self.color_mode))

    def expand_canvas(
        self, width: int, height: int, fill: Union[CanvasFill, str] = CanvasFill.FORMAT
    ) -> None:
        """
        Enlarge the canvas, centering the current image.

        Args:
            width: New canvas width
            height: New canvas height
            fill: CanvasFill; FORMAT follows the current format's background
        """
        fill = require_enum(fill, CanvasFill, InvalidInput)
        color = self.color_mode.fill if fill is CanvasFill.FORMAT else _CANVAS_FILL_COLORS[fill]
        self._commit(ImageGeometry.expand_canvas(self._buffer, width, height, color))

    def bounded_resize(self, max_width: int, max_height: int) -> None:
        """
        Resize into a bounding box while maintaining aspect ratio.

        Args:
            max_width: Maximum width in pixels, 0 for unlimited
            max_height: Maximum height in pixels, 0 for unlimited
        """
        self._commit(
            ImageProcessors.bounded_resize(self._buffer, max_width, max_height, self.color_mode)
        )

    # ------------------------------------------------------------------
    # Composite operations
    # ------------------------------------------------------------------

    def avatar(self, size: int) -> None:
        """
        Create a square thumbnail, for use in avatars/profile photos.

        Orientation is corrected, the centered square is cropped and then
        resampled to size x size.

        Args:
            size: Edge length in pixels
        """
        if isinstance(size, bool) or not isinstance(size, int):
            raise InvalidInput(f"Avatar size must be an integer, got {size!r}")
        if size <= 0:
            raise InvalidDimensions(f"Avatar size must be positive, got {size}")

        buffer, oriented = self._oriented_buffer()
        region = CropRegion.centered_square(buffer.width, buffer.height)
        buffer = ImageGeometry.crop(
            buffer, region.x, region.y, region.width, region.height, self.color_mode
        )
        buffer = ImageProcessors.resample(buffer, size, size, self.color_mode)

        self._commit(buffer, orientation_fixed=oriented)
        logger.debug(f"Created {size}x{size} avatar from region {region.to_dict()}")

    def thumbnail(self, max_width: Any, max_height: Any) -> None:
        """
        Create a thumbnail fitting a maximum width and height.

        Passing (0, 0) keeps the size, which is useful for format conversion.

        Args:
            max_width: Maximum width; integer-like, 0 or None for unlimited
            max_height: Maximum height; integer-like, 0 or None for unlimited

        Raises:
            InvalidInput: If a bound is not a non-negative integer
        """
        box = BoundingBox.parse(max_width, max_height)

        buffer, oriented = self._oriented_buffer()
        if not box.is_unbounded:
            buffer = ImageProcessors.bounded_resize(
                buffer, box.max_width, box.max_height, self.color_mode
            )

        self._commit(buffer, orientation_fixed=oriented)

    def convert_format_to(self, image_format: Union[ImageFormat, str]) -> None:
        """
        Change the output format. Pixel data is untouched.

        Args:
            image_format: ImageFormat, extension ('jpg', 'png', 'gif') or mime type

        Raises:
            UnsupportedFormat: If the format is not supported
        """
        self._format = ImageConverters.parse_format(image_format)

    def _commit(self, buffer: PixelBuffer, orientation_fixed: bool = False) -> None:
        self._buffer = buffer
        if orientation_fixed:
            self._orientation = ImageConstants.ORIENTATION_UPRIGHT
            if self._exif is not None:
                self._exif.reset_orientation()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def output(self) -> bytes:
        """
        Encode the current image.

        JPEG output carries the attached EXIF container, since the encoder
        does not preserve it.
        """
        data = ImageConverters.encode(self._buffer, self._format)
        if self._format is ImageFormat.JPEG and self._exif is not None:
            data = self._exif.insert_into(data)
        return data

    def save(self, filename: Optional[PathType] = None, append_ext: bool = False) -> str:
        """
        Save the image.

        Args:
            filename: Target path. A directory saves under the source basename;
                None overwrites the source file.
            append_ext: Append the current format's extension

        Returns:
            The path written
        """
        if filename is not None and os.path.isdir(filename):
            basename = self.get_file_info().basename
            if basename is None:
                raise InvalidInput("Cannot save into a directory without a source filename")
            target = os.path.join(str(filename), basename)
        elif filename is not None:
            target = str(filename)
        elif self._filename is not None:
            target = self._filename
        else:
            raise InvalidInput("No filename given and image was not loaded from a file")

        if append_ext:
            target = f"{target}.{self.get_extension()}"

        Path(target).write_bytes(self.output())
        logger.info(f"Saved {self._format.pil_format} image to {target}")
        return target

    def display(self, stream: Optional[BinaryIO] = None) -> str:
        """
        Write the encoded image to a binary stream (stdout by default).

        Returns:
            Content-Type value for the written bytes
        """
        stream = stream if stream is not None else sys.stdout.buffer
        stream.write(self.output())
        return self._format.mime_type

    def to_data_uri(self) -> str:
        """Encoded image as a base64 data URI."""
        return ImageConverters.to_data_uri(self.output(), self._format)
