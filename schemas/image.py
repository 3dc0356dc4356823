"""
Image operation models.

This module contains models for image operations:
- Bounding boxes for resizing
- Crop regions
- Dimension and file information results
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from core.exceptions import InvalidInput


class BoundingBox(BaseModel):
    """
    Maximum width/height a resize result must fit within.

    A value of 0 (or None) means unbounded on that axis. Integer-like values
    such as "120" or 120.0 are accepted; fractions and negatives are not.
    """

    max_width: int = Field(0, ge=0, description="Maximum width, 0 for unbounded")
    max_height: int = Field(0, ge=0, description="Maximum height, 0 for unbounded")

    @field_validator("max_width", "max_height", mode="before")
    @classmethod
    def _unbounded_sentinel(cls, value: Any) -> Any:
        if value is None:
            return 0
        if isinstance(value, bool):
            raise ValueError("must be an integer, not a bool")
        return value

    @classmethod
    def parse(cls, max_width: Any, max_height: Any) -> "BoundingBox":
        """
        Build a BoundingBox, raising InvalidInput on bad values.

        Raises:
            InvalidInput: If either bound is not a non-negative integer
        """
        try:
            return cls(max_width=max_width, max_height=max_height)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors())
            raise InvalidInput(f"Invalid {fields} parameter: {e.errors()[0]['msg']}") from e

    @property
    def is_unbounded(self) -> bool:
        """True if neither axis is limited."""
        return self.max_width == 0 and self.max_height == 0


class CropRegion(BaseModel):
    """Rectangle to crop; may extend past the image edges."""

    x: int = Field(..., description="X coordinate of the top-left corner")
    y: int = Field(..., description="Y coordinate of the top-left corner")
    width: int = Field(..., gt=0, description="Width")
    height: int = Field(..., gt=0, description="Height")

    @classmethod
    def centered_square(cls, width: int, height: int) -> "CropRegion":
        """
        Largest square centered on a width x height image.

        The longer axis is offset by half the difference, rounded down.
        """
        side = min(width, height)
        return cls(x=(width - side) // 2, y=(height - side) // 2, width=side, height=side)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


class Dimensions(BaseModel):
    """Pixel dimensions of an image."""

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    def to_dict(self) -> Dict[str, int]:
        """Short-key form: {'w': width, 'h': height}."""
        return {"w": self.width, "h": self.height}


class FileInfo(BaseModel):
    """Location of the file an image was loaded from."""

    file: Optional[str] = None
    dir: Optional[str] = None
    basename: Optional[str] = None
