"""Scheduler - frame ticks and one-shot timers for running flights."""

import asyncio
import concurrent.futures
import heapq
import itertools
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], None]
Future = Union[asyncio.Future, concurrent.futures.Future]


class TimerHandle:
    """One-shot timer returned by Scheduler.after()."""

    def __init__(self, due_ms: float, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False
        self._cancel_hook: Optional[Callable[[], None]] = None

    def cancel(self):
        """Cancel the timer. Safe to call more than once."""
        if self.cancelled or self.fired:
            return
        self.cancelled = True
        if self._cancel_hook:
            self._cancel_hook()
            self._cancel_hook = None


class TickSubscription:
    """Frame tick subscription returned by Scheduler.on_tick()."""

    def __init__(self, scheduler: 'Scheduler', callback: TickCallback):
        self._scheduler = scheduler
        self.callback = callback
        self.active = True

    def cancel(self):
        """Stop receiving ticks. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self._scheduler._unsubscribe(self)


class Scheduler(ABC):
    """
    Source of time for flights.

    Delivers monotonic frame ticks (in milliseconds) to subscribers at the
    host's refresh cadence, and one-shot delayed callbacks.
    """

    def __init__(self):
        self._subscriptions: List[TickSubscription] = []

    @abstractmethod
    def now(self) -> float:
        """Current monotonic time in milliseconds."""
        pass

    @abstractmethod
    def after(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once, delay_ms from now."""
        pass

    @abstractmethod
    def create_future(self) -> Future:
        """Unresolved future that timer callbacks may resolve."""
        pass

    def on_tick(self, callback: TickCallback) -> TickSubscription:
        """Call callback(now_ms) on every frame until the subscription is cancelled."""
        subscription = TickSubscription(self, callback)
        self._subscriptions.append(subscription)
        self._on_subscribed()
        return subscription

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _unsubscribe(self, subscription: TickSubscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def _on_subscribed(self):
        """Hook for schedulers that start their frame loop lazily."""
        pass

    def _deliver_tick(self, now_ms: float):
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.callback(now_ms)


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by the running asyncio event loop.

    The frame loop task starts with the first tick subscription and ends when
    the last one is cancelled. Must be used from the event loop thread.
    """

    def __init__(self, fps: int = 60, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Initialize scheduler.

        Args:
            fps: Target frames per second
            loop: Event loop (defaults to the running loop at first use)
        """
        super().__init__()
        self.fps = fps
        self.frame_duration = 1.0 / fps
        self.frame_count = 0
        self._loop = loop
        self._task: Optional[asyncio.Task] = None

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def after(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        delay_ms = max(0.0, delay_ms)
        handle = TimerHandle(self.now() + delay_ms, callback)

        def fire():
            handle.fired = True
            callback()

        loop_handle = self._get_loop().call_later(delay_ms / 1000.0, fire)
        handle._cancel_hook = loop_handle.cancel
        return handle

    def create_future(self) -> asyncio.Future:
        return self._get_loop().create_future()

    def _on_subscribed(self):
        if self._task is None or self._task.done():
            self._task = self._get_loop().create_task(self._run())

    async def _run(self):
        """Frame loop: tick subscribers, then sleep to hold the target FPS."""
        logger.debug(f"Frame loop started at {self.fps} FPS")
        try:
            while self._subscriptions:
                frame_start = time.monotonic()
                self.frame_count += 1

                self._deliver_tick(self.now())

                frame_elapsed = time.monotonic() - frame_start
                sleep_time = max(0, self.frame_duration - frame_elapsed)
                await asyncio.sleep(sleep_time)
        finally:
            self._task = None
            logger.debug(f"Frame loop stopped after {self.frame_count} frames")

    async def wait_idle(self):
        """Wait until the frame loop has no subscribers left."""
        while self._task is not None:
            await asyncio.sleep(self.frame_duration)


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler driven by advance().

    Useful for offline rendering and tests, with or without an event loop.
    Within each frame step, due timers fire first (in due order), then
    subscribers receive the tick.
    """

    def __init__(self, start_ms: float = 0.0, frame_ms: float = 16.0):
        """
        Initialize scheduler.

        Args:
            start_ms: Initial clock value
            frame_ms: Length of one frame step in milliseconds
        """
        super().__init__()
        self.frame_ms = frame_ms
        self._now = start_ms
        self._timers: List[Tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def after(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self._now + max(0.0, delay_ms), callback)
        heapq.heappush(self._timers, (handle.due_ms, next(self._sequence), handle))
        return handle

    def create_future(self) -> concurrent.futures.Future:
        # Not tied to an event loop: poll done() between advance() calls,
        # or await asyncio.wrap_future() from a coroutine.
        return concurrent.futures.Future()

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, handle in self._timers if not handle.cancelled)

    def advance(self, ms: float):
        """Move the clock forward by ms, one frame step at a time."""
        target = self._now + max(0.0, ms)
        while self._now < target:
            self._now = min(target, self._now + self.frame_ms)
            self._fire_due_timers()
            self._deliver_tick(self._now)

    def tick(self):
        """Deliver one tick at the current time without moving the clock."""
        self._fire_due_timers()
        self._deliver_tick(self._now)

    def _fire_due_timers(self):
        while self._timers and self._timers[0][0] <= self._now:
            _, _, handle = heapq.heappop(self._timers)
            if not handle.cancelled:
                handle.fired = True
                handle.callback()
