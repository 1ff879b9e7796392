"""FlyMotion - launches flights between points or on-screen elements."""

import logging
from typing import Any, Callable, Hashable, List, NamedTuple, Optional, Tuple

import numpy as np

from .config import FlyMotionConfig
from .exceptions import DestinationNotFound, OriginNotFound
from .flight import FlyAnimation
from .geometry import Point
from .overlay import OverlayHost, OverlaySprite
from .positions import ElementRegistry, PositionLookup
from .scheduler import Future, Scheduler
from .types import FlightSpec

logger = logging.getLogger(__name__)

ContentFactory = Callable[[int], Any]

# Bounds of the forced overlay disposal, independent of flight completion.
OVERLAY_LIFETIME_MARGIN_MS = 600
MIN_OVERLAY_LIFETIME_MS = 10
MAX_OVERLAY_LIFETIME_MS = 5000

# Dismiss transition of the default overlay host. Equal to the lifetime margin,
# so an unclamped item is on screen for exactly its flight duration.
OVERLAY_EXIT_DURATION_MS = OVERLAY_LIFETIME_MARGIN_MS


class RepeatItem(NamedTuple):
    """Timing of one repeated item."""

    index: int
    duration_ms: int
    overlay_lifetime_ms: int


def overlay_lifetime_ms(item_duration_ms: int) -> int:
    return max(MIN_OVERLAY_LIFETIME_MS, min(MAX_OVERLAY_LIFETIME_MS, item_duration_ms - OVERLAY_LIFETIME_MARGIN_MS))


def plan_repeats(duration_ms: int, repeat_count: int, items_delay_ms: int) -> List[RepeatItem]:
    """
    Stagger repeated items: item i flies for duration + (i + 1) * items_delay.

    A repeat_count below 1 yields an empty plan.
    """
    plan = []
    for i in range(max(0, repeat_count)):
        item_duration = max(0, duration_ms + (i + 1) * items_delay_ms)
        plan.append(RepeatItem(i, item_duration, overlay_lifetime_ms(item_duration)))
    return plan


def launch_wait_ms(duration_ms: int, repeat_count: int, items_delay_ms: int) -> int:
    """
    How long a launch keeps its caller waiting.

    One item delay past the last item's duration. This is a conservative
    scheduling delay, not a join over the flights: callers must not assume
    every item has visually arrived when it elapses.
    """
    return max(0, duration_ms + (repeat_count + 1) * items_delay_ms)


def _as_point(value: Tuple[float, float]) -> Point:
    return value if isinstance(value, Point) else Point(*value)


def _flight_spec(config: FlyMotionConfig, origin: Point, destination: Point, duration_ms: int) -> FlightSpec:
    return FlightSpec(
        origin=origin,
        destination=destination,
        duration_ms=duration_ms,
        control_range=config.control_range,
        keep_size_on_end=config.keep_size_on_end,
        delay_before_move_ms=config.delay_before_move_ms,
        easing=config.easing,
    )


class FlyMotion:
    """
    Creates flying motion effects between two points.

    Example:
        scheduler = AsyncioScheduler()
        fly = FlyMotion(scheduler, OverlayHost(scheduler, 64, 32))
        await fly.launch((4, 20), (56, 4), lambda i: coin, repeat_count=5)
    """

    def __init__(
        self,
        scheduler: Scheduler,
        overlay: Optional[OverlayHost] = None,
        positions: Optional[PositionLookup] = None,
        rng: Optional[np.random.Generator] = None,
        config: Optional[FlyMotionConfig] = None,
    ):
        """
        Initialize launcher.

        Args:
            scheduler: Frame ticks and timers
            overlay: Host for the flying items (defaults to one on scheduler
                with an OVERLAY_EXIT_DURATION_MS dismiss transition)
            positions: Element position lookup for launch_from_elements
            rng: Random generator for control points (process-wide default if None)
            config: Defaults for every launch
        """
        self.scheduler = scheduler
        if overlay is None:
            overlay = OverlayHost(scheduler, exit_duration_ms=OVERLAY_EXIT_DURATION_MS)
        self.overlay = overlay
        self.positions = positions if positions is not None else ElementRegistry()
        self.rng = rng
        self.config = config or FlyMotionConfig()

        self._flights: List[FlyAnimation] = []

    @property
    def flights(self) -> List[FlyAnimation]:
        """Flights that have not completed or been cancelled yet."""
        return list(self._flights)

    def launch_from_elements(
        self,
        origin_ref: Hashable,
        destination_ref: Hashable,
        content: ContentFactory,
        config: Optional[FlyMotionConfig] = None,
        **overrides,
    ) -> Future:
        """
        Launch flights between two mounted elements.

        Raises:
            OriginNotFound: origin_ref is not mounted (checked first)
            DestinationNotFound: destination_ref is not mounted
        """
        origin = self.positions.resolve(origin_ref)
        if origin is None:
            logger.warning(f"Cannot launch: origin element {origin_ref!r} not found")
            raise OriginNotFound()

        destination = self.positions.resolve(destination_ref)
        if destination is None:
            logger.warning(f"Cannot launch: destination element {destination_ref!r} not found")
            raise DestinationNotFound()

        return self.launch(origin, destination, content, config, **overrides)

    def launch(
        self,
        origin: Tuple[float, float],
        destination: Tuple[float, float],
        content: ContentFactory,
        config: Optional[FlyMotionConfig] = None,
        **overrides,
    ) -> Future:
        """
        Launch flights between two screen coordinates.

        Every item is mounted right away. Content and flights for all items
        are built before anything is mounted, so a failing content factory
        or an unknown easing leaves nothing behind.

        Args:
            origin: Start position (x, y)
            destination: End position (x, y)
            content: Returns the content to fly for each item index
            config: Launch settings (defaults to the launcher's config)
            **overrides: Individual FlyMotionConfig fields to change

        Returns:
            Future from the scheduler (an asyncio.Future on AsyncioScheduler),
            resolved after launch_wait_ms(); see its caveat
        """
        config = (config or self.config).replace(**overrides)
        origin, destination = _as_point(origin), _as_point(destination)

        plan = plan_repeats(config.duration_ms, config.repeat_count, config.items_delay_ms)
        contents = [content(item.index) for item in plan]
        flights = [
            FlyAnimation(_flight_spec(config, origin, destination, item.duration_ms), rng=self.rng)
            for item in plan
        ]
        future = self.scheduler.create_future()

        logger.debug(
            f"Launching {len(plan)} flight(s) from {origin} to {destination} "
            f"(durations={[item.duration_ms for item in plan]})"
        )

        for item, flight, item_content in zip(plan, flights, contents):
            self._start_flight(flight, item_content, item.overlay_lifetime_ms)

        def resolve():
            if not future.done():
                future.set_result(None)

        self.scheduler.after(
            launch_wait_ms(config.duration_ms, config.repeat_count, config.items_delay_ms),
            resolve,
        )
        return future

    def _start_flight(self, flight: FlyAnimation, content: Any, lifetime_ms: int):
        def render(now_ms: float) -> Optional[OverlaySprite]:
            frame = flight.tick(now_ms)
            if frame is None:
                return None
            return OverlaySprite(content, frame.position, frame.scale)

        handle = self.overlay.mount(render, lifetime_ms)

        def forget():
            if flight in self._flights:
                self._flights.remove(flight)

        def disposed():
            if not flight.finished:
                logger.debug(f"Overlay {handle.overlay_id} disposed before its flight completed")
            flight.cancel()
            forget()

        flight.on_complete(handle.unmount)
        handle.on_dispose(disposed)

        self._flights.append(flight)
        flight.start(self.scheduler.now())

    def cancel_all(self):
        """Tear down every live flight and its overlay."""
        self.overlay.unmount_all()
