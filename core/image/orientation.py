"""
EXIF orientation resolution.

Maps an EXIF orientation code (1-8) onto the ordered list of corrective
flip/rotate primitives that bring the image upright.
"""

from typing import Any, Dict, List

from core.constants import ImageConstants
from core.enums import OrientationOp
from core.exceptions import InvalidOrientation

# EXIF corrective mapping, applied left to right
ORIENTATION_FIX: Dict[int, List[OrientationOp]] = {
    1: [],
    2: [OrientationOp.FLIP_HORIZONTAL],
    3: [OrientationOp.FLIP_BOTH],
    4: [OrientationOp.FLIP_VERTICAL],
    5: [OrientationOp.ROTATE_CW, OrientationOp.FLIP_HORIZONTAL],
    6: [OrientationOp.ROTATE_CW],
    7: [OrientationOp.FLIP_HORIZONTAL, OrientationOp.ROTATE_CW],
    8: [OrientationOp.ROTATE_CCW],
}


def validate_orientation(orientation: Any) -> int:
    """
    Validate an EXIF orientation code.

    Args:
        orientation: Candidate code

    Returns:
        The code as int

    Raises:
        InvalidOrientation: If the value is not an integer from 1 to 8
    """
    if isinstance(orientation, bool) or not isinstance(orientation, int):
        raise InvalidOrientation(
            f"Orientation must be an integer from 1 to 8, got {orientation!r}"
        )
    if orientation not in ImageConstants.VALID_ORIENTATIONS:
        raise InvalidOrientation(f"Orientation must be an integer from 1 to 8, got {orientation}")
    return int(orientation)


def resolve(orientation: int) -> List[OrientationOp]:
    """
    Corrective operations for an orientation code.

    Args:
        orientation: EXIF orientation code 1-8

    Returns:
        New list of operations, in application order
    """
    return list(ORIENTATION_FIX[validate_orientation(orientation)])

