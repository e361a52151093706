from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/menus"
    log_level: str = "INFO"

    # Kafka
    kafka_bootstrap_servers: str = "kafka:9092"
    kafka_consumer_group: str = "analytics-service"
    kafka_topic_menu_views: str = "menu.viewed"
    kafka_topic_promo_clicks: str = "promo.clicked"
    kafka_topic_dlq: str = "analytics.dlq"

    # Observability
    otlp_endpoint: str = "http://jaeger:4318/v1/traces"
    metrics_port: int = 8003

    model_config = {"env_file": ".env"}


settings = Settings()
