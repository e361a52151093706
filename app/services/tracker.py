"""
Analytics event tracker.

Records a menu view or a promotion click at most once per browsing session
and identifier. Never raises to its caller:
  - malformed identifiers are dropped before reaching the store
  - a session already marked for the identifier is skipped
  - an unusable session store degrades to tracking every time
  - sink failures are logged and swallowed, no retry
"""

import logging
import re
import uuid
from collections.abc import MutableMapping
from enum import Enum
from typing import Any

from app.config import settings
from app.metrics import ANALYTICS_EVENTS
from app.services.analytics_sink import AnalyticsSink

logger = logging.getLogger(__name__)

MENU_VIEW_KEY = "menu_view_tracked_"
PROMO_CLICK_KEY = "promo_click_tracked_"

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

SessionMarkers = MutableMapping[str, Any]


class TrackOutcome(str, Enum):
    RECORDED = "recorded"
    DUPLICATE = "duplicate"
    REJECTED = "rejected"
    FAILED = "failed"


def is_valid_identifier(value: Any) -> bool:
    return isinstance(value, str) and bool(_UUID_RE.match(value))


def sanitize_source(source: str | None) -> str | None:
    if not source or not isinstance(source, str):
        return None
    return source[: settings.max_source_length]


def build_user_agent(user_agent: str | None, source: str | None = None) -> str:
    clean_ua = (user_agent or "")[: settings.max_user_agent_length]
    clean_source = sanitize_source(source)
    if not clean_source:
        return clean_ua
    return f"{clean_ua} | source:{clean_source}"[: settings.max_user_agent_length]


def _already_tracked(markers: SessionMarkers | None, key: str) -> bool:
    if markers is None:
        return False
    try:
        return markers.get(key) == "true"
    except Exception as exc:
        logger.warning("Session store unreadable, tracking without dedup", extra={"error": str(exc)})
        return False


def _mark_tracked(markers: SessionMarkers | None, key: str) -> None:
    if markers is None:
        return
    try:
        markers[key] = "true"
    except Exception as exc:
        logger.warning("Session store unwritable, dedup skipped", extra={"error": str(exc)})


class AnalyticsTracker:
    def __init__(self, sink: AnalyticsSink) -> None:
        self._sink = sink

    async def track_view(
        self,
        menu_id: str,
        markers: SessionMarkers | None,
        user_agent: str | None = None,
        source: str | None = None,
    ) -> TrackOutcome:
        if not is_valid_identifier(menu_id):
            return self._outcome("view", TrackOutcome.REJECTED)
        # Markers are keyed on the canonical lowercase form.
        menu_id = str(uuid.UUID(menu_id))

        clean_source = sanitize_source(source)
        key = f"{MENU_VIEW_KEY}{menu_id}"
        if clean_source:
            key = f"{key}:{clean_source}"

        if _already_tracked(markers, key):
            return self._outcome("view", TrackOutcome.DUPLICATE)

        try:
            await self._sink.insert_menu_view(uuid.UUID(menu_id), build_user_agent(user_agent, source))
        except Exception as exc:
            # Analytics must never break the visitor's page.
            logger.warning("Menu view not recorded", extra={"menu_id": menu_id, "error": str(exc)})
            return self._outcome("view", TrackOutcome.FAILED)

        _mark_tracked(markers, key)
        logger.info("Menu view recorded", extra={"menu_id": menu_id, "source": clean_source})
        return self._outcome("view", TrackOutcome.RECORDED)

    async def track_click(self, promotion_id: str, markers: SessionMarkers | None) -> TrackOutcome:
        if not is_valid_identifier(promotion_id):
            return self._outcome("click", TrackOutcome.REJECTED)
        promotion_id = str(uuid.UUID(promotion_id))

        key = f"{PROMO_CLICK_KEY}{promotion_id}"
        if _already_tracked(markers, key):
            return self._outcome("click", TrackOutcome.DUPLICATE)

        try:
            await self._sink.insert_promo_click(uuid.UUID(promotion_id))
        except Exception as exc:
            logger.warning(
                "Promo click not recorded", extra={"promotion_id": promotion_id, "error": str(exc)}
            )
            return self._outcome("click", TrackOutcome.FAILED)

        _mark_tracked(markers, key)
        logger.info("Promo click recorded", extra={"promotion_id": promotion_id})
        return self._outcome("click", TrackOutcome.RECORDED)

    @staticmethod
    def _outcome(kind: str, outcome: TrackOutcome) -> TrackOutcome:
        ANALYTICS_EVENTS.labels(kind=kind, outcome=outcome.value).inc()
        return outcome
