"""fly-motion - Curved fly-to animations on a transient overlay layer."""

from .config import FlyMotionConfig
from .curve import (MOVE_SHARE, SHRINK_THRESHOLD, SPREAD_SHARE, PhaseDurations,
                    phase_durations, phased_position, position_at,
                    quadratic_bezier_point, scale_at)
from .easing import EASING_FUNCTIONS
from .exceptions import DestinationNotFound, FlyMotionError, OriginNotFound
from .flight import FlyAnimation
from .geometry import Point, Size
from .launcher import FlyMotion, RepeatItem, launch_wait_ms, plan_repeats
from .overlay import OverlayHandle, OverlayHost, OverlaySprite
from .positions import ElementRegistry, PositionLookup
from .render_buffer import RenderBuffer
from .sampler import sample_control_point
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from .types import FlightFrame, FlightSpec, FlightState

__all__ = [
    "FlyMotion",
    "FlyMotionConfig",
    "FlyAnimation",
    "FlightSpec",
    "FlightFrame",
    "FlightState",
    "RepeatItem",
    "plan_repeats",
    "launch_wait_ms",
    "Point",
    "Size",
    "quadratic_bezier_point",
    "phase_durations",
    "phased_position",
    "position_at",
    "scale_at",
    "PhaseDurations",
    "SPREAD_SHARE",
    "MOVE_SHARE",
    "SHRINK_THRESHOLD",
    "sample_control_point",
    "EASING_FUNCTIONS",
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "OverlayHost",
    "OverlayHandle",
    "OverlaySprite",
    "RenderBuffer",
    "PositionLookup",
    "ElementRegistry",
    "FlyMotionError",
    "OriginNotFound",
    "DestinationNotFound",
]
