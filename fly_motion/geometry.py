"""Geometry value types shared by the curve engine and the collaborators."""

from typing import NamedTuple


class Point(NamedTuple):
    """2D screen coordinate in pixels."""

    x: float
    y: float


class Size(NamedTuple):
    """Width and height of an element in pixels."""

    width: float
    height: float


def lerp(start: Point, end: Point, t: float) -> Point:
    """
    Linear interpolation between two points.

    Written as a weighted sum so that t=0 and t=1 land exactly on the
    endpoints.
    """
    return Point(
        (1 - t) * start.x + t * end.x,
        (1 - t) * start.y + t * end.y,
    )


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))
