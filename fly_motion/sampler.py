"""Random control point sampling."""

from typing import Optional

import numpy as np

from .geometry import Point

# Process-wide generator used when the caller does not inject one.
_default_rng = np.random.default_rng()


def default_rng() -> np.random.Generator:
    """Return the shared process-wide random generator."""
    return _default_rng


def sample_control_point(
    origin: Point,
    control_range: float,
    rng: Optional[np.random.Generator] = None,
) -> Point:
    """
    Pick a random control point near the origin.

    The point is uniform in the square of side 2 * control_range centred on
    the origin, and gives the flight its arc.

    Args:
        origin: Flight start position
        control_range: Half-side of the sampling square in pixels
        rng: Random generator (defaults to the process-wide one)
    """
    rng = rng if rng is not None else _default_rng
    x = origin.x + rng.random() * (control_range * 2) - control_range
    y = origin.y + rng.random() * (control_range * 2) - control_range
    return Point(x, y)
