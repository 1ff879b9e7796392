"""Launch configuration and defaults."""

import dataclasses
from dataclasses import dataclass
from typing import Optional

DEFAULT_DURATION_MS = 500
DEFAULT_CONTROL_RANGE = 100
DEFAULT_REPEAT_COUNT = 1
DEFAULT_ITEMS_DELAY_MS = 50
DEFAULT_KEEP_SIZE_ON_END = False
DEFAULT_EASING = 'linear'


@dataclass(frozen=True)
class FlyMotionConfig:
    """
    Settings for one launch.

    Attributes:
        duration_ms: Base flight duration in milliseconds
        control_range: Range for random control point generation
        repeat_count: Number of items to animate
        items_delay_ms: Extra duration added per item, staggering arrivals
        keep_size_on_end: Whether to maintain item size at the end of the flight
        delay_before_move_ms: Hold time on the control point (None: simple arc)
        easing: Easing of the simple arc

    Values are not validated: negative numbers produce collapsed flights
    rather than errors.
    """

    duration_ms: int = DEFAULT_DURATION_MS
    control_range: float = DEFAULT_CONTROL_RANGE
    repeat_count: int = DEFAULT_REPEAT_COUNT
    items_delay_ms: int = DEFAULT_ITEMS_DELAY_MS
    keep_size_on_end: bool = DEFAULT_KEEP_SIZE_ON_END
    delay_before_move_ms: Optional[int] = None
    easing: str = DEFAULT_EASING

    def replace(self, **changes) -> 'FlyMotionConfig':
        """Copy with some fields changed. Unknown fields raise TypeError."""
        if not changes:
            return self
        return dataclasses.replace(self, **changes)
