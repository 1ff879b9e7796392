"""
Progress curves for flights.

A curve maps raw progress in [0, 1] to curve progress in [0, 1]. Every curve
here starts at 0, ends exactly at 1 and never decreases, so an item never
overshoots its destination or backtracks along its arc.
"""

from typing import Callable, Dict

ProgressCurve = Callable[[float], float]


def linear(t: float) -> float:
    return t


def accelerate(t: float) -> float:
    """Starts at rest: the move phase leaving the control point."""
    return t * t


def decelerate(t: float) -> float:
    """Arrives at rest: the spread phase settling on the control point."""
    return 1.0 - (1.0 - t) * (1.0 - t)


def smooth(t: float) -> float:
    # smoothstep, flat at both ends
    return t * t * (3.0 - 2.0 * t)


EASING_FUNCTIONS: Dict[str, ProgressCurve] = {
    'linear': linear,
    'ease_in': accelerate,
    'ease_out': decelerate,
    'ease_in_out': smooth,
}


def get_easing(name: str) -> ProgressCurve:
    """
    Look up a simple-flight curve by name.

    Raises:
        ValueError: name is not in EASING_FUNCTIONS
    """
    try:
        return EASING_FUNCTIONS[name]
    except KeyError:
        raise ValueError(f"Unknown easing function {name!r}, expected one of {sorted(EASING_FUNCTIONS)}") from None
