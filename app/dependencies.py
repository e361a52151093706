from collections.abc import MutableMapping
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.services.analytics_sink import KafkaAnalyticsSink
from app.services.content_store import ContentStore
from app.services.tracker import AnalyticsTracker


def get_now() -> datetime:
    return datetime.now(timezone.utc)


def get_content_store(db: AsyncSession = Depends(get_db)) -> ContentStore:
    return ContentStore(db)


def get_tracker(request: Request, store: ContentStore = Depends(get_content_store)) -> AnalyticsTracker:
    if settings.analytics_sink == "kafka":
        return AnalyticsTracker(KafkaAnalyticsSink(request.app.state.kafka_producer))
    return AnalyticsTracker(store)


def get_session_markers(request: Request) -> MutableMapping[str, Any] | None:
    # Absent when SessionMiddleware is not installed; tracking then skips dedup.
    return request.scope.get("session")


def request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")
