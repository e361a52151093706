"""
Headless active-section tracking for the public menu page.

The renderer owns the real viewport; this module decides which section the
navigation should highlight and drives programmatic scrolling. Timers are
expressed against an injectable monotonic clock and are settled by
``tick()``, so the state machine runs the same under a browser bridge or a
test.
"""

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from app.config import settings
from app.schemas.public_menu import PublicMenuView

logger = logging.getLogger(__name__)

HIGHLIGHT_CLASSES = ("ring-2", "ring-primary", "ring-offset-2", "ring-offset-background")
# Sections scrolled past the top 30% of the viewport no longer count.
BOTTOM_EXCLUSION = "-70%"


def section_anchor(section_id) -> str:
    return f"section-{section_id}"


def item_anchor(item_id) -> str:
    return f"item-{item_id}"


class ScrollState(str, Enum):
    IDLE = "idle"
    USER_SCROLLING = "user_scrolling"
    PROGRAMMATIC = "programmatic"


@dataclass(frozen=True)
class IntersectionEntry:
    anchor_id: str
    top: float  # bounding-rect top relative to the viewport, in px
    is_intersecting: bool


class Viewport(Protocol):
    @property
    def scroll_y(self) -> float: ...

    def anchor_top(self, anchor_id: str) -> float | None: ...

    def scroll_to(self, top: float) -> None: ...

    def add_classes(self, anchor_id: str, classes: Iterable[str]) -> None: ...

    def remove_classes(self, anchor_id: str, classes: Iterable[str]) -> None: ...


class ActiveSectionTracker:
    def __init__(
        self,
        viewport: Viewport,
        section_ids: Iterable,
        item_sections: Mapping | None = None,
        header_offset: int | None = None,
        cooldown_ms: int | None = None,
        highlight_ms: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._viewport = viewport
        if header_offset is None:
            header_offset = settings.scroll_header_offset
        if cooldown_ms is None:
            cooldown_ms = settings.scroll_cooldown_ms
        if highlight_ms is None:
            highlight_ms = settings.item_highlight_ms
        self._header_offset = header_offset
        self._cooldown = cooldown_ms / 1000
        self._highlight = highlight_ms / 1000
        self._clock = clock
        self._highlights: dict[str, float] = {}
        self.reset(section_ids, item_sections)

    @classmethod
    def for_view(cls, viewport: Viewport, view: PublicMenuView, **kwargs) -> "ActiveSectionTracker":
        item_sections = {
            str(item.id): str(section.id) for section in view.sections for item in section.items
        }
        return cls(viewport, [s.id for s in view.sections], item_sections, **kwargs)

    @property
    def active_section_id(self) -> str | None:
        return self._active

    @property
    def state(self) -> ScrollState:
        return self._state

    @property
    def root_margin(self) -> str:
        """Observer margin: active a little before the top, not once mostly scrolled past."""
        return f"-{self._header_offset}px 0px {BOTTOM_EXCLUSION} 0px"

    @property
    def observed_anchors(self) -> list[str]:
        return [section_anchor(s) for s in self._section_ids]

    def reset(self, section_ids: Iterable, item_sections: Mapping | None = None) -> None:
        self._section_ids = [str(s) for s in section_ids]
        self._item_sections = {str(k): str(v) for k, v in (item_sections or {}).items()}
        self._active: str | None = None
        self._state = ScrollState.IDLE
        self._suppressed_until: float | None = None
        for anchor_id in self._highlights:
            self._viewport.remove_classes(anchor_id, HIGHLIGHT_CLASSES)
        self._highlights = {}

    def tick(self) -> None:
        now = self._clock()
        if self._state is ScrollState.PROGRAMMATIC and now >= (self._suppressed_until or 0):
            self._state = ScrollState.IDLE
            self._suppressed_until = None
        for anchor_id, expires_at in list(self._highlights.items()):
            if now >= expires_at:
                self._viewport.remove_classes(anchor_id, HIGHLIGHT_CLASSES)
                del self._highlights[anchor_id]

    def on_intersections(self, entries: Iterable[IntersectionEntry]) -> str | None:
        self.tick()
        if self._state is ScrollState.PROGRAMMATIC:
            return self._active

        prefix = section_anchor("")
        intersecting = [
            e for e in entries
            if e.is_intersecting and e.anchor_id.startswith(prefix)
            and e.anchor_id[len(prefix):] in self._section_ids
        ]
        if not intersecting:
            return self._active

        # Closest to the top: entries at or below it first, then the least negative.
        nearest = min(intersecting, key=lambda e: (e.top < 0, abs(e.top)))
        self._state = ScrollState.USER_SCROLLING
        self._active = nearest.anchor_id[len(prefix):]
        return self._active

    def scroll_to_section(self, section_id) -> bool:
        section_id = str(section_id)
        if section_id not in self._section_ids:
            logger.debug("Ignoring scroll to unknown section", extra={"section_id": section_id})
            return False
        return self._scroll_to(section_anchor(section_id), section_id)

    def scroll_to_item(self, item_id) -> bool:
        item_id = str(item_id)
        anchor = item_anchor(item_id)
        if not self._scroll_to(anchor, self._item_sections.get(item_id)):
            return False
        self._viewport.add_classes(anchor, HIGHLIGHT_CLASSES)
        self._highlights[anchor] = self._clock() + self._highlight
        return True

    def _scroll_to(self, anchor_id: str, section_id: str | None) -> bool:
        top = self._viewport.anchor_top(anchor_id)
        if top is None:
            return False
        if section_id is not None:
            self._active = section_id
        self._state = ScrollState.PROGRAMMATIC
        self._suppressed_until = self._clock() + self._cooldown
        self._viewport.scroll_to(top + self._viewport.scroll_y - self._header_offset)
        return True
