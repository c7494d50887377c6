"""FastAPI application factory."""

import asyncio
import random
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import load_config
from core.errors import (
    InvalidArgumentError,
    MalformedIdentifierError,
    MissingCapabilityError,
    SortIdError,
    TimestampOverflowError,
)
from core.health import (
    HealthChecker,
    check_event_loop,
    create_clock_check,
    create_journal_check,
)
from internal.logging import get_logger, LogLevel, StructuredLogger, IssueJournal
from sortid.encoder import SourceContext, secure_random
from utils.crash import create_async_handler
from api.routes import admin, health, ids

VERSION = "1.0.0"

_ERROR_STATUS = {
    InvalidArgumentError: 400,
    TimestampOverflowError: 400,
    MalformedIdentifierError: 400,
    MissingCapabilityError: 503,
}


def create_context(encoder_config):
    """Build the service's SourceContext from the encoder section of the config."""
    return SourceContext(
        random_source=secure_random if encoder_config.random_source == "secure" else random.random,
        time_length=encoder_config.time_length,
        random_length=encoder_config.random_length,
        strict_overflow=encoder_config.strict_overflow,
    )


def create_app(config=None, context=None):
    """Create and configure the FastAPI application."""
    config = config or load_config()

    StructuredLogger.configure(min_level=LogLevel[config.logging.level.upper()])
    logger_instance = get_logger().bind(service="sortid")

    context = context or create_context(config.encoder)
    journal = IssueJournal(file_path=config.logging.file)
    health_checker = HealthChecker()
    health_checker.register("event_loop", check_event_loop, critical=True)
    health_checker.register("clock", create_clock_check(context), critical=True)
    health_checker.register("journal", create_journal_check(journal), critical=False)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger_instance.info("Application starting", version=VERSION)
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(create_async_handler(logger_instance))

        await journal.start()
        logger_instance.info("Application started successfully", journal=config.logging.file)

        yield

        logger_instance.info("Application shutting down")
        await journal.stop()
        logger_instance.info("Application shutdown complete", **journal.get_stats())

    app = FastAPI(
        title="Sortable Identifier Service",
        version=VERSION,
        description="mints lexicographically sortable identifiers",
        lifespan=lifespan,
    )
    app.state.context = context
    app.state.journal = journal
    app.state.health_checker = health_checker

    @app.exception_handler(SortIdError)
    async def sortid_error_handler(request: Request, exc: SortIdError):
        status_code = _ERROR_STATUS.get(type(exc), 500)
        log = logger_instance.error if status_code >= 500 else logger_instance.warn
        log("Request failed", error=exc, path=request.url.path, error_id=exc.error_id)
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    # Initialize route modules with dependencies
    ids.init(context, journal)
    admin.init(context, journal, health_checker)
    health.init(journal, health_checker)

    app.include_router(ids.router)
    app.include_router(admin.router)
    app.include_router(health.router)

    return app
