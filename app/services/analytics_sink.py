"""
Destinations for tracked analytics events.

ContentStore satisfies AnalyticsSink directly (row insert). KafkaAnalyticsSink
publishes the event instead and leaves the insert to analytics_service.
"""

import logging
import uuid
from typing import Protocol

from aiokafka import AIOKafkaProducer
from opentelemetry.propagate import inject

from app.config import settings
from shared.events import MenuViewedEvent, PromoClickedEvent
from shared.logging_config import request_id_var

logger = logging.getLogger(__name__)


class AnalyticsSink(Protocol):
    async def insert_menu_view(self, menu_id: uuid.UUID, user_agent: str | None) -> None: ...

    async def insert_promo_click(self, promotion_id: uuid.UUID) -> None: ...


class KafkaAnalyticsSink:
    def __init__(self, producer: AIOKafkaProducer) -> None:
        self._producer = producer

    async def _publish(self, topic: str, key: uuid.UUID, payload: bytes) -> None:
        # Propagate trace context into the Kafka message
        outgoing_headers: dict[str, str] = {}
        inject(outgoing_headers)
        await self._producer.send_and_wait(
            topic,
            key=str(key).encode(),
            value=payload,
            headers=[(k, v.encode()) for k, v in outgoing_headers.items()],
        )
        logger.debug("Published %s event", topic, extra={"key": str(key)})

    async def insert_menu_view(self, menu_id: uuid.UUID, user_agent: str | None) -> None:
        event = MenuViewedEvent(
            correlation_id=request_id_var.get(),
            menu_id=menu_id,
            user_agent=user_agent,
        )
        await self._publish(settings.kafka_topic_menu_views, menu_id, event.model_dump_json().encode())

    async def insert_promo_click(self, promotion_id: uuid.UUID) -> None:
        event = PromoClickedEvent(correlation_id=request_id_var.get(), promotion_id=promotion_id)
        await self._publish(
            settings.kafka_topic_promo_clicks, promotion_id, event.model_dump_json().encode()
        )
