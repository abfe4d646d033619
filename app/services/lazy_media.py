"""
Lazy media units.

A unit stays IDLE until its element first comes within ``root_margin`` of
the viewport, then asks for its resource exactly once (PENDING) and becomes
LOADED when the resource reports completion. The observation handle is held
only until the first trigger or until the unit is unmounted.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from markupsafe import Markup

from app.core.config import settings
from app.core.templates import templates
from app.services.viewport import IntersectionEntry, Rect

logger = logging.getLogger(__name__)


class MediaPhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    LOADED = "loaded"


@dataclass
class MediaViewState:
    is_in_viewport: bool = False
    is_loaded: bool = False

    @property
    def phase(self) -> MediaPhase:
        if self.is_loaded:
            return MediaPhase.LOADED
        if self.is_in_viewport:
            return MediaPhase.PENDING
        return MediaPhase.IDLE


class Subscription(Protocol):
    def disconnect(self) -> None: ...


class ViewportObserver(Protocol):
    def observe(
        self,
        rect: Rect,
        root_margin: float,
        callback: Callable[[IntersectionEntry], None],
    ) -> Subscription: ...


FetchCallback = Callable[[str], None]


class LazyMedia:
    template_name: str = ""

    def __init__(
        self,
        url: str,
        alt_text: str = "",
        width: Optional[int] = None,
        height: Optional[int] = None,
        rect: Optional[Rect] = None,
        root_margin: Optional[float] = None,
        on_fetch: Optional[FetchCallback] = None,
    ):
        self.url = url
        self.alt_text = alt_text
        self.width = width
        self.height = height
        self.rect = rect or Rect(0, 0, width or 0, height or 0)
        self.root_margin = (
            settings.LAZY_MEDIA_ROOT_MARGIN_PX if root_margin is None else root_margin
        )
        self.on_fetch = on_fetch
        self.state: Optional[MediaViewState] = None
        self._subscription: Optional[Subscription] = None

    @property
    def mounted(self) -> bool:
        return self.state is not None

    @property
    def phase(self) -> MediaPhase:
        return self.state.phase if self.state else MediaPhase.IDLE

    @property
    def observing(self) -> bool:
        return self._subscription is not None

    def mount(self, observer: ViewportObserver) -> None:
        if self.mounted:
            raise RuntimeError("media unit is already mounted")
        self.state = MediaViewState()
        # The observer may call back synchronously from observe()
        subscription = observer.observe(self.rect, self.root_margin, self.handle_intersection)
        if self.state is not None and self.state.phase is MediaPhase.IDLE:
            self._subscription = subscription
        else:
            subscription.disconnect()

    def _release(self) -> None:
        if self._subscription is not None:
            subscription, self._subscription = self._subscription, None
            subscription.disconnect()

    def handle_intersection(self, entry: IntersectionEntry) -> None:
        state = self.state
        if state is None or state.is_in_viewport or not entry.is_intersecting:
            return
        state.is_in_viewport = True
        self._release()
        logger.debug("Lazy media triggered | url=%s", self.url)
        if self.on_fetch is not None:
            self.on_fetch(self.url)

    def handle_load(self) -> None:
        if self.state is not None and self.state.phase is MediaPhase.PENDING:
            self.state.is_loaded = True

    def unmount(self) -> None:
        self._release()
        self.state = None

    def _style(self) -> str:
        parts = []
        if self.width:
            parts.append(f"width: {self.width}px")
        if self.height:
            parts.append(f"height: {self.height}px")
        return "; ".join(parts)

    def render(self) -> Markup:
        template = templates.get_template(self.template_name)
        return Markup(
            template.render(
                url=self.url,
                alt_text=self.alt_text,
                phase=self.phase.value,
                style=self._style(),
            )
        )


class LazyImage(LazyMedia):
    template_name = "media/lazy_image.html"


class LazyVideo(LazyMedia):
    template_name = "media/lazy_video.html"
