"""
Tests for enum parsing helpers
"""

import pytest

from core.enums import CanvasFill, FlipAxis
from core.exceptions import InvalidInput
from core.utils.enum_converter import parse_enum, require_enum


class TestParseEnum:
    """Test lenient parsing"""

    def test_passes_members_through(self):
        assert parse_enum(FlipAxis.BOTH, FlipAxis) is FlipAxis.BOTH

    def test_none_returns_default(self):
        assert parse_enum(None, FlipAxis, FlipAxis.VERTICAL) is FlipAxis.VERTICAL

    def test_case_sensitive_without_normalize(self):
        assert parse_enum("Vertical", FlipAxis) is None

    def test_normalize(self):
        assert parse_enum("  Vertical ", FlipAxis, normalize=True) is FlipAxis.VERTICAL

    def test_unknown_returns_default(self):
        assert parse_enum("sideways", FlipAxis, FlipAxis.HORIZONTAL) is FlipAxis.HORIZONTAL


class TestRequireEnum:
    """Test strict parsing"""

    def test_match(self):
        assert require_enum("TRANSBLACK", CanvasFill, InvalidInput) is CanvasFill.TRANSBLACK

    def test_lists_choices(self):
        with pytest.raises(InvalidInput) as exc_info:
            require_enum("pink", CanvasFill, InvalidInput)
        assert "transblack" in exc_info.value.message
