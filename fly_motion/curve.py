"""
Curve engine - pure trajectory math.

Two flight shapes are supported:

- Simple: a quadratic Bezier arc from origin to destination, bent by a
  random control point near the origin.
- Phased: the item first spreads out from the origin to the control point
  (ease-out), holds there for ``delay_before_move_ms``, then travels to the
  destination (ease-in).

Durations are integer milliseconds. Every helper here is total: negative or
inconsistent inputs are clamped, never rejected.
"""

from typing import NamedTuple, Optional

from .easing import accelerate, decelerate, get_easing
from .geometry import Point, clamp, lerp
from .types import FlightSpec

# Presentation tunables for the phased flight: share of the active time
# (total minus hold) spent spreading out vs. travelling.
SPREAD_SHARE = 0.2
MOVE_SHARE = 0.8

# Raw progress after which the item shrinks to nothing.
SHRINK_THRESHOLD = 0.985
SHRINK_WINDOW = 1.0 - SHRINK_THRESHOLD


class PhaseDurations(NamedTuple):
    """Phase lengths of a phased flight, in milliseconds."""

    spread_ms: float
    hold_ms: float
    move_ms: float
    direct: bool  # hold swallowed the whole flight: straight line instead


def quadratic_bezier_point(t: float, origin: Point, control: Point, destination: Point) -> Point:
    """
    Calculate a point on the quadratic Bezier curve at time t.

    Args:
        t: Curve parameter between 0 and 1
        origin: Start point (t=0)
        control: Control point bending the curve
        destination: End point (t=1)

    Returns:
        P(t) = (1-t)^2 * origin + 2(1-t)t * control + t^2 * destination
    """
    u = 1 - t
    x = u * u * origin.x + 2 * u * t * control.x + t * t * destination.x
    y = u * u * origin.y + 2 * u * t * control.y + t * t * destination.y
    return Point(x, y)


def phase_durations(duration_ms: int, delay_before_move_ms: Optional[int]) -> PhaseDurations:
    """
    Split a flight into spread, hold and move phases.

    If the hold is at least as long as the whole flight, both spread and hold
    vanish and the item flies straight to the destination for the full
    duration.
    """
    total = max(0, duration_ms)
    hold = max(0, delay_before_move_ms or 0)

    if total <= hold:
        return PhaseDurations(0.0, 0.0, float(total), True)

    active = total - hold
    return PhaseDurations(SPREAD_SHARE * active, float(hold), MOVE_SHARE * active, False)


def phased_position(t: float, spec: FlightSpec, control: Point) -> Point:
    """Position of a phased flight at raw linear progress t."""
    t = clamp(t)
    phases = phase_durations(spec.duration_ms, spec.delay_before_move_ms)

    if phases.direct:
        return lerp(spec.origin, spec.destination, t)

    elapsed = t * max(0, spec.duration_ms)

    if elapsed < phases.spread_ms:
        local = elapsed / phases.spread_ms
        return lerp(spec.origin, control, decelerate(local))

    elapsed -= phases.spread_ms
    if elapsed < phases.hold_ms:
        return control

    elapsed -= phases.hold_ms
    if t >= 1.0 or phases.move_ms <= 0:
        local = 1.0
    else:
        local = clamp(elapsed / phases.move_ms)
    return lerp(control, spec.destination, accelerate(local))


def scale_at(progress: float, keep_size_on_end: bool = False) -> float:
    """
    Size factor of the item at raw linear progress.

    Full size until SHRINK_THRESHOLD, then a linear ramp down to zero at the
    end of the flight, unless keep_size_on_end.
    """
    if keep_size_on_end or progress <= SHRINK_THRESHOLD:
        return 1.0
    return clamp(1.0 - (progress - SHRINK_THRESHOLD) / SHRINK_WINDOW)


def position_at(t: float, spec: FlightSpec, control: Point) -> Point:
    """Position of a flight at raw linear progress t, for either flight shape."""
    t = clamp(t)
    if spec.phased:
        return phased_position(t, spec, control)
    eased = get_easing(spec.easing)(t)
    return quadratic_bezier_point(eased, spec.origin, control, spec.destination)
