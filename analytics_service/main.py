"""
Analytics Service entry point.
Starts AIOKafka consumer + producer (for the DLQ), then runs the consumer loop.
"""

import asyncio
import logging

import prometheus_client
from aiokafka import AIOKafkaConsumer, AIOKafkaProducer

from analytics_service.config import settings
from analytics_service.consumer import run_consumer
from analytics_service.database import AsyncSessionLocal, engine
from shared.logging_config import setup_logging
from shared.tracing import setup_tracing

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

prometheus_client.start_http_server(settings.metrics_port)
setup_tracing("analytics-service", settings.otlp_endpoint)


async def main() -> None:
    consumer = AIOKafkaConsumer(
        settings.kafka_topic_menu_views,
        settings.kafka_topic_promo_clicks,
        bootstrap_servers=settings.kafka_bootstrap_servers,
        group_id=settings.kafka_consumer_group,
        enable_auto_commit=False,
        auto_offset_reset="earliest",
    )
    producer = AIOKafkaProducer(
        bootstrap_servers=settings.kafka_bootstrap_servers,
        enable_idempotence=True,
    )

    await producer.start()
    await consumer.start()
    logger.info(
        "Analytics service started",
        extra={
            "bootstrap_servers": settings.kafka_bootstrap_servers,
            "consumer_group": settings.kafka_consumer_group,
            "metrics_port": settings.metrics_port,
        },
    )

    try:
        await run_consumer(consumer, producer, AsyncSessionLocal)
    finally:
        await consumer.stop()
        await producer.stop()
        await engine.dispose()
        logger.info("Analytics service stopped")


if __name__ == "__main__":
    asyncio.run(main())
