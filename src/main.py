"""FastAPI application entry point with lifespan management."""

from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api import (
    activities_router,
    ai_router,
    audit_logs_router,
    auth_router,
    clients_router,
    compliance_router,
    health_router,
    metrics_router,
    reports_router,
    seo_router,
    settings_router,
    tasks_router,
    websites_router,
)
from src.api.errors import register_exception_handlers
from src.api.middleware import RequestContextMiddleware
from src.core.config import settings
from src.core.database import create_engine, create_session_factory
from src.core.logging import configure_logging, get_logger
from src.core.sentry import init_sentry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle resources.

    Startup:
        - Configure structured logging
        - Initialize Sentry error tracking
        - Create database engine and session factory

    Shutdown:
        - Dispose database engine
    """
    configure_logging()
    logger.info("Starting application", environment=settings.environment)

    init_sentry()

    app.state.db_engine = create_engine()
    app.state.async_session = create_session_factory(app.state.db_engine)
    logger.info("Database engine created")

    yield

    logger.info("Shutting down application")
    await app.state.db_engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title="ClientDesk",
    description="Client, task and compliance dashboard with SEO tooling",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestContextMiddleware)

register_exception_handlers(app)

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(metrics_router)
app.include_router(clients_router)
app.include_router(tasks_router)
app.include_router(activities_router)
app.include_router(audit_logs_router)
app.include_router(settings_router)
app.include_router(compliance_router)
app.include_router(reports_router)
app.include_router(websites_router)
app.include_router(seo_router)
app.include_router(ai_router)
