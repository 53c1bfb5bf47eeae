"""Rectangle perimeter geometry for clock faces.

A rectangular panel has no circle to hang clock hands on, so positions
are taken along the panel's border instead: a fraction of a full turn
maps to a distance walked clockwise around the rectangle, starting at
top-center.
"""

import math
from typing import NamedTuple

from ..core.errors import InvalidDimensionError


class Point(NamedTuple):
    """2D coordinate, x to the right and y downwards."""

    x: float
    y: float


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero.

    Python's built-in round() uses banker's rounding, which would make
    2.5 -> 2 and shift hands and color channels by one step.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def perimeter_point(fraction: float, width: float, height: float) -> Point:
    """Map a fraction of a turn to a point on the rectangle's border.

    Fraction 0 is top-center; increasing fractions move clockwise
    (towards the top-right corner). A point lying exactly on a corner is
    reported by the earlier edge in traversal order.

    Args:
        fraction: Progress around the rectangle, in [0, 1)
        width: Rectangle width, > 0
        height: Rectangle height, > 0

    Returns:
        Point on the border

    Raises:
        InvalidDimensionError: If width or height is not positive
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensionError(width, height)

    perimeter = 2 * (width + height)

    # Distance from the top-left corner; w/2 shifts zero to top-center
    dist = (fraction * perimeter + width / 2) % perimeter

    if dist <= width:
        return Point(dist, 0)
    if dist <= width + height:
        return Point(width, dist - width)
    if dist <= 2 * width + height:
        return Point(width - (dist - width - height), height)
    return Point(0, height - (dist - 2 * width - height))


def hand_point(
    center_x: float,
    center_y: float,
    perimeter_x: float,
    perimeter_y: float,
    length_ratio: float,
) -> Point:
    """Point at `length_ratio` of the way from the center to a border point.

    Ratios outside [0, 1] extrapolate along the same line. The result is
    snapped to the pixel grid.
    """
    return Point(
        round_half_away(center_x + length_ratio * (perimeter_x - center_x)),
        round_half_away(center_y + length_ratio * (perimeter_y - center_y)),
    )
