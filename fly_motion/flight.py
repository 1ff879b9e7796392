"""Animation driver - one flying item."""

import logging
from typing import Callable, List, Optional

import numpy as np

from .curve import position_at, scale_at
from .easing import get_easing
from .geometry import Point, clamp
from .sampler import sample_control_point
from .types import FlightFrame, FlightSpec, FlightState

logger = logging.getLogger(__name__)


class FlyAnimation:
    """
    Drives a single item along its flight.

    Lifecycle: CREATED -> RUNNING -> COMPLETED, or CANCELLED when the hosting
    overlay goes away first. Position is a pure function of elapsed time, so a
    dropped frame is simply caught up on the next tick.

    Example:
        flight = FlyAnimation(FlightSpec(Point(0, 0), Point(100, 100), 500))
        flight.start(now_ms)
        frame = flight.tick(now_ms + 250)
    """

    def __init__(
        self,
        spec: FlightSpec,
        rng: Optional[np.random.Generator] = None,
        on_frame: Optional[Callable[[FlightFrame], None]] = None,
    ):
        """
        Initialize flight.

        Args:
            spec: What to fly, where and for how long
            rng: Random generator for the control point
            on_frame: Render callback invoked with every new frame
        """
        get_easing(spec.easing)

        self.spec = spec
        self.control = sample_control_point(spec.origin, spec.control_range, rng)
        self.state = FlightState.CREATED
        self.last_frame: Optional[FlightFrame] = None

        self._on_frame = on_frame
        self._on_complete_callbacks: List[Callable[[], None]] = []
        self._started_at: Optional[float] = None

    @property
    def duration_ms(self) -> int:
        return self.spec.duration_ms

    @property
    def running(self) -> bool:
        return self.state is FlightState.RUNNING

    @property
    def finished(self) -> bool:
        return self.state in (FlightState.COMPLETED, FlightState.CANCELLED)

    def on_complete(self, callback: Callable[[], None]):
        """Register callback for when the flight reaches its destination."""
        self._on_complete_callbacks.append(callback)

    def start(self, now_ms: float):
        """Start the progress clock."""
        if self.state is not FlightState.CREATED:
            return
        self._started_at = now_ms
        self.state = FlightState.RUNNING

    def progress(self, now_ms: float) -> float:
        """Raw linear progress at now_ms, clamped to [0, 1]."""
        if self._started_at is None:
            return 0.0
        duration = max(0, self.spec.duration_ms)
        if duration == 0:
            return 1.0
        return clamp((now_ms - self._started_at) / duration)

    def frame_at(self, progress: float) -> FlightFrame:
        """Compute the frame for a given raw progress without side effects."""
        progress = clamp(progress)
        position: Point = position_at(progress, self.spec, self.control)
        return FlightFrame(progress, position, scale_at(progress, self.spec.keep_size_on_end))

    def tick(self, now_ms: float) -> Optional[FlightFrame]:
        """
        Advance the flight to now_ms.

        Returns:
            The new frame, or None if the flight is not running
        """
        if self.state is not FlightState.RUNNING:
            return None

        frame = self.frame_at(self.progress(now_ms))
        self.last_frame = frame

        if self._on_frame:
            self._on_frame(frame)

        if frame.progress >= 1.0 and self.state is FlightState.RUNNING:
            self._complete()

        return frame

    def cancel(self):
        """Abort the flight. No further callbacks are made."""
        if self.finished:
            return
        self.state = FlightState.CANCELLED
        self._on_frame = None
        self._on_complete_callbacks.clear()
        logger.debug(f"Flight to {self.spec.destination} cancelled")

    def _complete(self):
        self.state = FlightState.COMPLETED
        logger.debug(f"Flight to {self.spec.destination} completed after {self.spec.duration_ms}ms")

        callbacks = self._on_complete_callbacks
        self._on_complete_callbacks = []
        for callback in callbacks:
            callback()
