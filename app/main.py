import logging
from contextlib import asynccontextmanager

from aiokafka import AIOKafkaProducer
from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from prometheus_client import make_asgi_app
from starlette.middleware.sessions import SessionMiddleware

from app.config import settings
from app.database import Base, engine
from app.middleware.metrics import MetricsMiddleware
from app.middleware.request_id import RequestIDMiddleware
from app.routers import admin, analytics, public_menu, tracking
from app.services.menu_service import seed_demo_menu
from shared.logging_config import setup_logging
from shared.tracing import setup_tracing

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

setup_tracing("menu-api", settings.otlp_endpoint)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up — creating database tables")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)

    if settings.seed_demo_menu:
        await seed_demo_menu()

    producer: AIOKafkaProducer | None = None
    if settings.analytics_sink == "kafka":
        producer = AIOKafkaProducer(
            bootstrap_servers=settings.kafka_bootstrap_servers,
            enable_idempotence=True,
        )
        await producer.start()
    app.state.kafka_producer = producer
    logger.info("Startup complete", extra={"analytics_sink": settings.analytics_sink})

    yield

    if producer is not None:
        await producer.stop()
    await engine.dispose()
    logger.info("Shutting down")


app = FastAPI(
    title="Digital Menu Service",
    description="Public menu assembly, promotion scheduling and visit analytics",
    version="1.0.0",
    lifespan=lifespan,
)

FastAPIInstrumentor.instrument_app(app)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)
# No max_age: the cookie, and the dedup markers in it, end with the browser session.
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret_key,
    session_cookie=settings.session_cookie,
    max_age=None,
    same_site="lax",
)
app.include_router(public_menu.router, prefix="/menus", tags=["public-menu"])
app.include_router(tracking.router, prefix="/track", tags=["tracking"])
app.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])

# Expose Prometheus metrics at /metrics
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
