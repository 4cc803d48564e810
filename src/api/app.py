"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.error import register_error_handlers
from src.api.routes import (
    activity_logs,
    clients,
    cron,
    invoices,
    payments,
    projects,
    settings,
    sheets,
    tasks,
    templates,
    time_entries,
)
from src.depends import close_store

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if config.ENABLE_SENTRY and config.DSN_SENTRY:
        sentry_sdk.init(dsn=config.DSN_SENTRY, environment=config.SENTRY_ENVIRONMENT)
        logger.info(f"Sentry enabled for environment {config.SENTRY_ENVIRONMENT}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await close_store()

    app = FastAPI(
        title="Sheets Invoicing Service",
        description="Invoicing, time tracking and payments on top of a spreadsheet store",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    for module in (
        clients,
        invoices,
        payments,
        templates,
        projects,
        tasks,
        time_entries,
        activity_logs,
        settings,
        sheets,
        cron,
    ):
        app.include_router(module.router, prefix=config.API_PREFIX)

    return app
