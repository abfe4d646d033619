"""
Server-side viewport model for lazy media.

``LayoutViewport`` plays the part of the browser's IntersectionObserver over
a page whose element rectangles are known up front (the gallery grid). It
reports to each observer callback as soon as the element is observed and
again whenever the viewport scrolls, until the observation is disconnected.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    def expanded(self, margin: float) -> "Rect":
        return Rect(
            self.x - margin,
            self.y - margin,
            self.width + 2 * margin,
            self.height + 2 * margin,
        )

    def intersects(self, other: "Rect") -> bool:
        # Touching edges count, matching IntersectionObserver's zero-area hits
        return (
            self.x <= other.right
            and other.x <= self.right
            and self.y <= other.bottom
            and other.y <= self.bottom
        )


@dataclass(frozen=True)
class IntersectionEntry:
    is_intersecting: bool


@dataclass(frozen=True)
class GridLayout:
    """Fixed column grid: ``columns`` tiles per row, square gaps between tiles."""

    columns: int
    tile_height: float
    gap: float = 0
    width: float = 1280

    def __post_init__(self):
        if self.columns < 1:
            raise ValueError("columns must be at least 1")

    @property
    def tile_width(self) -> float:
        return (self.width - self.gap * (self.columns - 1)) / self.columns

    def tile(self, index: int) -> Rect:
        row, column = divmod(index, self.columns)
        return Rect(
            x=column * (self.tile_width + self.gap),
            y=row * (self.tile_height + self.gap),
            width=self.tile_width,
            height=self.tile_height,
        )

    def tiles(self, count: int) -> Iterator[Rect]:
        for index in range(count):
            yield self.tile(index)


IntersectionCallback = Callable[[IntersectionEntry], None]


class _Observation:
    def __init__(self, viewport: "LayoutViewport", key: int, rect: Rect, margin: float, callback: IntersectionCallback):
        self._viewport = viewport
        self._key = key
        self.rect = rect
        self.margin = margin
        self.callback = callback
        self.active = True

    def notify(self) -> None:
        if not self.active:
            return
        visible = self._viewport.visible_rect().expanded(self.margin)
        self.callback(IntersectionEntry(is_intersecting=visible.intersects(self.rect)))

    def disconnect(self) -> None:
        if self.active:
            self.active = False
            self._viewport._release(self._key)


class LayoutViewport:
    """A scrollable window of ``width`` x ``height`` over a laid-out page."""

    def __init__(self, width: float, height: float, scroll_y: float = 0):
        self.width = width
        self.height = height
        self.scroll_y = scroll_y
        self._observations: Dict[int, _Observation] = {}
        self._next_key = 0

    def visible_rect(self) -> Rect:
        return Rect(0, self.scroll_y, self.width, self.height)

    @property
    def active_observations(self) -> int:
        return len(self._observations)

    def observe(self, rect: Rect, root_margin: float, callback: IntersectionCallback) -> _Observation:
        key = self._next_key
        self._next_key += 1
        observation = _Observation(self, key, rect, root_margin, callback)
        self._observations[key] = observation
        observation.notify()
        return observation

    def scroll_to(self, offset: float) -> None:
        self.scroll_y = max(0, offset)
        # Callbacks may disconnect while we iterate
        for observation in list(self._observations.values()):
            observation.notify()

    def _release(self, key: int) -> None:
        self._observations.pop(key, None)
