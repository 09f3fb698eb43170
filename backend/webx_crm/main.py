"""Main FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from webx_crm.api import (
    calendar,
    clients,
    dashboard,
    health,
    oneoff_sales,
    projects,
    recurring_sales,
    renewals,
    reports,
    tasks,
    xero_exports,
)
from webx_crm.core.config import settings
from webx_crm.core.errors import register_exception_handlers
from webx_crm.core.limiter import limiter
from webx_crm.db.session import build_database
from webx_crm.middleware.request_tracing import RequestTracingMiddleware

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.DEBUG if settings.DEBUG else logging.INFO
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the database pool on startup and release it on shutdown."""
    logger.info("Starting application", app_name=settings.APP_NAME)

    database = build_database(settings)
    app.state.database = database

    if settings.DB_CREATE_TABLES:
        try:
            await database.create_tables()
        except Exception:
            logger.exception("Failed to create database tables - application cannot start")
            await database.dispose()
            raise

    # Error tracking is optional
    if settings.SENTRY_DSN:
        try:
            import sentry_sdk

            sentry_sdk.init(
                dsn=settings.SENTRY_DSN,
                environment=settings.SENTRY_ENVIRONMENT,
                traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            )
            logger.info("Sentry initialized")
        except Exception:
            logger.exception("Failed to initialize Sentry - continuing without error tracking")

    yield

    logger.info("Shutting down application")
    try:
        await database.dispose()
        logger.info("Database connections closed")
    except Exception:
        logger.exception("Error closing database connections")


def create_app() -> FastAPI:
    """Build the application with its middleware and routers."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    register_exception_handlers(app)

    app.add_middleware(RequestTracingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
        max_age=settings.CORS_MAX_AGE,
    )

    app.include_router(health.router, tags=["health"])
    for module in (
        clients,
        oneoff_sales,
        recurring_sales,
        projects,
        tasks,
        renewals,
        calendar,
        xero_exports,
        dashboard,
        reports,
    ):
        app.include_router(module.router, prefix=settings.API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "webx_crm.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
    )
