"""
Enum conversion utilities.

Provides standardized methods for converting strings to enums,
with support for case-insensitive parsing and fallback defaults.
"""

from typing import Any, Optional, Type, TypeVar

T = TypeVar("T")


def parse_enum(value: Any, enum_class: Type[T], default: Optional[T] = None, normalize: bool = False) -> Optional[T]:
    """
    Parse value to enum with fallback to default.

    Args:
        value: Value to parse (string, enum, or None)
        enum_class: Enum class to parse to
        default: Default enum value if parsing fails
        normalize: Whether to lowercase string before parsing
            (for case-insensitive matching)

    Returns:
        Parsed enum value or default

    Example:
        >>> axis = parse_enum("Horizontal", FlipAxis, normalize=True)
        >>> # Returns FlipAxis.HORIZONTAL for "horizontal", "Horizontal", "HORIZONTAL"
    """
    # Already an enum instance
    if isinstance(value, enum_class):
        return value

    # None or missing value
    if value is None:
        return default

    # String value - try to parse
    try:
        str_value = value.strip().lower() if normalize and isinstance(value, str) else value
        return enum_class(str_value)
    except (ValueError, AttributeError):
        return default


def require_enum(value: Any, enum_class: Type[T], error_class: Type[Exception], normalize: bool = True) -> T:
    """
    Parse value to enum, raising error_class when it does not match.

    Example:
        >>> require_enum("both", FlipAxis, InvalidInput)
        >>> # Returns FlipAxis.BOTH
    """
    parsed = parse_enum(value, enum_class, normalize=normalize)
    if parsed is None:
        choices = ", ".join(str(member.value) for member in enum_class)
        raise error_class(f"Invalid {enum_class.__name__} {value!r}; expected one of: {choices}")
    return parsed
