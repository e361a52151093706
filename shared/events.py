"""
Pydantic event schemas for the analytics pipeline.
The public API publishes them; analytics_service turns them into rows.
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventBase(BaseModel):
    event_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_version: int = 1
    correlation_id: str  # carries X-Request-ID from the HTTP layer
    occurred_at: datetime = Field(default_factory=_utcnow)

    model_config = {"extra": "ignore"}


class MenuViewedEvent(EventBase):
    menu_id: uuid.UUID
    user_agent: str | None = None


class PromoClickedEvent(EventBase):
    promotion_id: uuid.UUID
