from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/menus"
    log_level: str = "INFO"

    # Browser session (analytics dedup markers live in this cookie)
    session_secret_key: str = "change-me"
    session_cookie: str = "menu_session"

    # Analytics
    analytics_sink: str = "database"  # database | kafka
    max_user_agent_length: int = 512
    max_source_length: int = 32

    # Kafka
    kafka_bootstrap_servers: str = "kafka:9092"
    kafka_topic_menu_views: str = "menu.viewed"
    kafka_topic_promo_clicks: str = "promo.clicked"

    # Public menu
    promotion_refresh_seconds: int = 20
    print_highlight_limit: int = 4
    seed_demo_menu: bool = True

    # Active-section tracker defaults
    scroll_header_offset: int = 120
    scroll_cooldown_ms: int = 800
    item_highlight_ms: int = 2000

    # Observability
    otlp_endpoint: str = "http://jaeger:4318/v1/traces"

    model_config = {"env_file": ".env"}


settings = Settings()
