"""
Tests for the operation models
"""

import pytest

from core.exceptions import InvalidInput
from schemas import BoundingBox, CropRegion


class TestBoundingBox:
    """Test bounding box parsing"""

    def test_none_is_unbounded(self):
        box = BoundingBox.parse(None, None)
        assert (box.max_width, box.max_height) == (0, 0)
        assert box.is_unbounded

    @pytest.mark.parametrize("value", ["120", 120.0, 120])
    def test_integer_like(self, value):
        assert BoundingBox.parse(value, 0).max_width == 120

    @pytest.mark.parametrize("value", [-1, 1.5, "wide", True, [10]])
    def test_rejected(self, value):
        with pytest.raises(InvalidInput) as exc_info:
            BoundingBox.parse(0, value)
        assert "max_height" in exc_info.value.message


class TestCropRegion:
    """Test centered square regions"""

    @pytest.mark.parametrize(
        "size,expected",
        [
            ((200, 100), {"x": 50, "y": 0, "width": 100, "height": 100}),
            ((100, 200), {"x": 0, "y": 50, "width": 100, "height": 100}),
            ((5, 2), {"x": 1, "y": 0, "width": 2, "height": 2}),
            ((7, 7), {"x": 0, "y": 0, "width": 7, "height": 7}),
        ],
    )
    def test_centered_square(self, size, expected):
        assert CropRegion.centered_square(*size).to_dict() == expected
