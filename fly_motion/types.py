"""Value types describing a single flight."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from .geometry import Point


@dataclass(frozen=True)
class FlightSpec:
    """
    Everything one animated item needs to fly.

    Attributes:
        origin: Start position
        destination: End position
        duration_ms: Total flight time in milliseconds
        control_range: Radius of the random control point around the origin
        keep_size_on_end: If True, the item does not shrink away at the end
        delay_before_move_ms: Hold time on the control point. None selects the
            simple Bezier flight, any value selects the spread/hold/move flight
        easing: Easing applied to progress in the simple flight
    """

    origin: Point
    destination: Point
    duration_ms: int
    control_range: float = 100
    keep_size_on_end: bool = False
    delay_before_move_ms: Optional[int] = None
    easing: str = 'linear'

    @property
    def phased(self) -> bool:
        return self.delay_before_move_ms is not None


class FlightFrame(NamedTuple):
    """Snapshot of a running flight at one tick."""

    progress: float
    position: Point
    scale: float


class FlightState(Enum):
    CREATED = 'created'
    RUNNING = 'running'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
