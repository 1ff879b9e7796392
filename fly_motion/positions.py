"""Position lookup - where are the on-screen elements right now."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Hashable, Optional, Tuple

from .geometry import Point, Size

logger = logging.getLogger(__name__)


class PositionLookup(ABC):
    """Resolves a stable element reference to its current screen bounds."""

    @abstractmethod
    def resolve(self, ref: Hashable) -> Optional[Point]:
        """Top-left screen position of the element, or None if not mounted."""
        pass

    @abstractmethod
    def size(self, ref: Hashable) -> Optional[Size]:
        """Size of the element, or None if not mounted."""
        pass


class ElementRegistry(PositionLookup):
    """
    In-memory position lookup.

    The host application mounts elements as it lays them out and unmounts
    them when they leave the screen.

    Example:
        registry.mount('cart_icon', (300, 12), size=(24, 24))
        registry.resolve('cart_icon')  # Point(x=300, y=12)
    """

    def __init__(self):
        self._elements: Dict[Hashable, Tuple[Point, Optional[Size]]] = {}

    def __contains__(self, ref: Hashable) -> bool:
        return ref in self._elements

    def __len__(self) -> int:
        return len(self._elements)

    def mount(self, ref: Hashable, position: Tuple[float, float], size: Optional[Tuple[float, float]] = None):
        """Register an element at position (x, y) with an optional (width, height)."""
        self._elements[ref] = (Point(*position), Size(*size) if size is not None else None)
        logger.debug(f"Element {ref!r} mounted at {position}")

    def move(self, ref: Hashable, position: Tuple[float, float]):
        """Update the position of a mounted element."""
        if ref not in self._elements:
            raise KeyError(f"Element {ref!r} is not mounted")
        _, size = self._elements[ref]
        self._elements[ref] = (Point(*position), size)

    def unmount(self, ref: Hashable):
        """Forget an element. Unknown references are ignored."""
        self._elements.pop(ref, None)

    def resolve(self, ref: Hashable) -> Optional[Point]:
        entry = self._elements.get(ref)
        return entry[0] if entry else None

    def size(self, ref: Hashable) -> Optional[Size]:
        entry = self._elements.get(ref)
        return entry[1] if entry else None
