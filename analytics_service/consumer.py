"""
At-least-once Kafka consumer writing analytics rows.

Guarantees:
  - Idempotency: the row id is the event_id, so a redelivered event is skipped
  - At-least-once delivery: offset committed only after the DB write
  - DLQ: unparseable or unwritable messages are forwarded to analytics.dlq
"""

import logging

from aiokafka import AIOKafkaConsumer, AIOKafkaProducer
from opentelemetry import trace
from opentelemetry.propagate import extract
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from analytics_service.config import settings
from analytics_service.metrics import MESSAGES_CONSUMED
from analytics_service.models import MenuView, PromoClick
from shared.events import MenuViewedEvent, PromoClickedEvent
from shared.logging_config import request_id_var

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _row_for(topic: str, payload: bytes) -> MenuView | PromoClick:
    """Parse a message into the row it should produce; raises on bad payloads."""
    if topic == settings.kafka_topic_menu_views:
        event = MenuViewedEvent.model_validate_json(payload)
        request_id_var.set(event.correlation_id)
        return MenuView(
            id=event.event_id,
            menu_id=event.menu_id,
            user_agent=event.user_agent,
            viewed_at=event.occurred_at,
        )
    if topic == settings.kafka_topic_promo_clicks:
        event = PromoClickedEvent.model_validate_json(payload)
        request_id_var.set(event.correlation_id)
        return PromoClick(
            id=event.event_id,
            promotion_id=event.promotion_id,
            clicked_at=event.occurred_at,
        )
    raise ValueError(f"Unexpected topic {topic!r}")


async def run_consumer(
    consumer: AIOKafkaConsumer,
    producer: AIOKafkaProducer,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Main consumer loop; runs until cancelled."""
    async for msg in consumer:
        await handle_message(msg, consumer, producer, session_factory)


async def _dead_letter(msg, consumer: AIOKafkaConsumer, producer: AIOKafkaProducer) -> None:
    await producer.send_and_wait(settings.kafka_topic_dlq, value=msg.value)
    MESSAGES_CONSUMED.labels(topic=msg.topic, status="dlq").inc()
    await consumer.commit()


async def handle_message(
    msg,
    consumer: AIOKafkaConsumer,
    producer: AIOKafkaProducer,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    # Extract W3C trace context propagated via Kafka headers
    headers = {k: v.decode() for k, v in msg.headers} if msg.headers else {}
    ctx = extract(headers)

    with tracer.start_as_current_span(f"kafka.consume.{msg.topic}", context=ctx):
        try:
            row = _row_for(msg.topic, msg.value)
        except ValueError as exc:
            logger.error(
                "Failed to parse analytics message — sending to DLQ",
                extra={"topic": msg.topic, "error": str(exc), "offset": msg.offset, "partition": msg.partition},
            )
            await _dead_letter(msg, consumer, producer)
            return

        async with session_factory() as db:
            # --- Idempotency check ---
            if await db.get(type(row), row.id) is not None:
                logger.info("Analytics event already stored — skipping", extra={"event_id": str(row.id)})
                await consumer.commit()
                return

            db.add(row)
            try:
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.error(
                    "Failed to store analytics event — sending to DLQ",
                    extra={"topic": msg.topic, "event_id": str(row.id), "error": str(exc)},
                )
                await _dead_letter(msg, consumer, producer)
                return

        MESSAGES_CONSUMED.labels(topic=msg.topic, status="stored").inc()
        logger.info("Stored analytics event", extra={"topic": msg.topic, "event_id": str(row.id)})

        # --- Commit offset only after successful DB write ---
        await consumer.commit()
