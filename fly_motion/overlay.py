"""Overlay host - transient layer drawn above the application."""

import itertools
import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from .geometry import Point
from .render_buffer import RenderBuffer
from .scheduler import Scheduler, TickSubscription, TimerHandle

logger = logging.getLogger(__name__)


class OverlaySprite(NamedTuple):
    """What an overlay draws on one frame."""

    content: Any
    position: Point
    scale: float = 1.0


RenderFn = Callable[[float], Optional[OverlaySprite]]


class OverlayHandle:
    """A mounted overlay entry. Unmounting is idempotent."""

    def __init__(self, host: 'OverlayHost', overlay_id: int, render_fn: RenderFn):
        self.host = host
        self.overlay_id = overlay_id
        self.render_fn = render_fn
        self.disposed = False
        self.dismissing = False
        self._lifetime_timer: Optional[TimerHandle] = None
        self._on_dispose_callbacks: List[Callable[[], None]] = []

    def on_dispose(self, callback: Callable[[], None]):
        """Register callback for when the overlay is removed, for any reason."""
        self._on_dispose_callbacks.append(callback)

    def unmount(self):
        """Remove the overlay from its host."""
        if self.disposed:
            return
        self.disposed = True

        if self._lifetime_timer is not None:
            self._lifetime_timer.cancel()
            self._lifetime_timer = None

        self.host._remove(self)

        callbacks = self._on_dispose_callbacks
        self._on_dispose_callbacks = []
        for callback in callbacks:
            callback()


class OverlayHost:
    """
    Hosts any number of concurrent overlays on top of the application.

    Each mounted render function is called once per scheduler tick until its
    lifetime (plus exit_duration_ms) elapses or it is unmounted. Disposal
    wins over whatever the overlay is still drawing. When a display callback and a canvas
    size are set, every tick composites the returned sprites into a
    RenderBuffer and hands it to the callback.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        width: Optional[int] = None,
        height: Optional[int] = None,
        exit_duration_ms: float = 0,
    ):
        """
        Initialize overlay host.

        Args:
            scheduler: Source of frame ticks and lifetime timers
            width: Overlay canvas width in pixels (needed for compositing)
            height: Overlay canvas height in pixels (needed for compositing)
            exit_duration_ms: How long an expired overlay keeps rendering
                before it is removed
        """
        self.scheduler = scheduler
        self.width = width
        self.height = height
        self.exit_duration_ms = exit_duration_ms

        self._overlays: Dict[int, OverlayHandle] = {}
        self._ids = itertools.count(1)
        self._subscription: Optional[TickSubscription] = None
        self._display_callback: Optional[Callable[[RenderBuffer], None]] = None

        self.last_sprites: List[OverlaySprite] = []

    @property
    def overlays(self) -> List[OverlayHandle]:
        """Currently mounted overlays, in mount order."""
        return list(self._overlays.values())

    def set_display_callback(self, callback: Callable[[RenderBuffer], None]):
        """
        Set callback function to display the composited overlay layer.

        Args:
            callback: Function that takes RenderBuffer and displays it
        """
        self._display_callback = callback

    def mount(self, render_fn: RenderFn, lifetime_ms: Optional[float] = None) -> OverlayHandle:
        """
        Mount a new overlay.

        Args:
            render_fn: Called with the tick time, returns the sprite to draw or None
            lifetime_ms: Forced disposal delay. None keeps it until unmount()

        Returns:
            Handle used to unmount the overlay or observe its disposal
        """
        handle = OverlayHandle(self, next(self._ids), render_fn)
        self._overlays[handle.overlay_id] = handle

        if lifetime_ms is not None:
            handle._lifetime_timer = self.scheduler.after(lifetime_ms, lambda: self._expire(handle))

        if self._subscription is None:
            self._subscription = self.scheduler.on_tick(self._on_tick)

        logger.debug(f"Mounted overlay {handle.overlay_id} (lifetime={lifetime_ms}ms, live={len(self._overlays)})")
        return handle

    def unmount_all(self):
        """Tear down every overlay, e.g. when the hosting view goes away."""
        for handle in self.overlays:
            handle.unmount()

    def _expire(self, handle: OverlayHandle):
        handle._lifetime_timer = None
        if handle.disposed:
            return

        logger.debug(f"Overlay {handle.overlay_id} reached its lifetime, disposing")
        if self.exit_duration_ms > 0:
            handle.dismissing = True
            handle._lifetime_timer = self.scheduler.after(self.exit_duration_ms, handle.unmount)
        else:
            handle.unmount()

    def _remove(self, handle: OverlayHandle):
        self._overlays.pop(handle.overlay_id, None)
        if not self._overlays and self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _on_tick(self, now_ms: float):
        sprites = []
        for handle in self.overlays:
            if handle.disposed:
                continue
            # A render that unmounts its own overlay still draws this frame
            sprite = handle.render_fn(now_ms)
            if sprite is not None:
                sprites.append(sprite)

        self.last_sprites = sprites

        if self._display_callback and self.width and self.height:
            self._display_callback(self.compose(sprites))

    def compose(self, sprites: List[OverlaySprite]) -> RenderBuffer:
        """
        Composite sprites onto a transparent canvas.

        RenderBuffer content is scaled about its centre, the way the item
        shrinks in place at the end of a flight. Other content types are
        skipped; hosts drawing their own widgets use last_sprites instead.
        """
        canvas = RenderBuffer(self.width or 0, self.height or 0)

        for sprite in sprites:
            content = sprite.content
            if not isinstance(content, RenderBuffer):
                continue

            scaled = content.scaled(sprite.scale)
            if scaled.width == 0 or scaled.height == 0:
                continue

            x = sprite.position.x + (content.width - scaled.width) / 2
            y = sprite.position.y + (content.height - scaled.height) / 2
            canvas.blit(scaled, (x, y))

        return canvas
