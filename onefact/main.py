"""FastAPI application entry point.

This module creates and configures the FastAPI application instance.

Run with:
    uvicorn onefact.main:app
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from onefact.api import chat_router, collection_router, facts_router
from onefact.core.config import get_config
from onefact.core.container import ApplicationContainer
from onefact.core.database import check_db_connection, init_db
from onefact.core.exceptions import (
    ContentValidationError,
    FactNotFoundError,
    LLMError,
    OneFactError,
    RecordAlreadyExistsError,
    RecordNotFoundError,
)
from onefact.core.logging import get_logger, setup_logging
from onefact.core.redis import check_redis_connection

APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"

logger = get_logger(__name__)

# Most specific first
ERROR_STATUS: list[tuple[type[OneFactError], int]] = [
    (FactNotFoundError, status.HTTP_404_NOT_FOUND),
    (RecordNotFoundError, status.HTTP_404_NOT_FOUND),
    (RecordAlreadyExistsError, status.HTTP_409_CONFLICT),
    (ContentValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (LLMError, status.HTTP_502_BAD_GATEWAY),
]


def status_for(error: OneFactError) -> int:
    """Map an application error onto an HTTP status code."""
    for error_class, code in ERROR_STATUS:
        if isinstance(error, error_class):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_app_error(request: Request, exc: Exception) -> JSONResponse:
    """Render OneFactError subclasses as JSON with a mapped status."""
    assert isinstance(exc, OneFactError)
    code = status_for(exc)
    log = logger.error if code >= 500 else logger.info
    log("Request failed", path=request.url.path, status=code, **exc.to_dict())
    return JSONResponse(status_code=code, content=exc.to_dict())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Startup builds the container, creates tables in development, and starts
    the in-process collection scheduler when enabled. Shutdown stops the
    scheduler (letting an in-flight pass finish) and releases clients.

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    config = get_config()
    logger.info("Starting OneFact application", env=config.app_env, store=config.fact_store)

    container: ApplicationContainer = getattr(app.state, "container", None) or (
        ApplicationContainer()
    )
    app.state.container = container

    if config.fact_store == "sql" and config.is_development:
        engine = container.db_engine()
        if await check_db_connection(engine):
            await init_db(engine)
        else:
            logger.warning("Database connection not available, skipping initialization")

    if not await check_redis_connection(container.redis()):
        logger.warning("Redis not available, daily facts will not be cached")

    scheduler = container.scheduler()
    if config.collection_enabled:
        scheduler.start_background()

    yield

    logger.info("Shutting down OneFact application")
    await scheduler.stop()
    await container.http_client().close()
    await container.redis().aclose()
    if config.fact_store == "sql":
        await container.db_engine().dispose()
    logger.info("Cleanup complete")


def create_app(container: ApplicationContainer | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        container: Prebuilt container (the lifespan creates one if omitted)

    Returns:
        Configured application
    """
    setup_logging()
    config = get_config()

    application = FastAPI(
        title=config.app_name,
        description="Fact-of-the-day collection and serving API",
        version=APP_VERSION,
        docs_url="/docs" if config.is_development else None,
        redoc_url="/redoc" if config.is_development else None,
        lifespan=lifespan,
    )
    if container is not None:
        application.state.container = container

    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(OneFactError, handle_app_error)

    application.include_router(facts_router, prefix=API_PREFIX)
    application.include_router(collection_router, prefix=API_PREFIX)
    application.include_router(chat_router, prefix=API_PREFIX)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        cfg = get_config()
        return {
            "status": "healthy",
            "app": cfg.app_name,
            "env": cfg.app_env,
        }

    @application.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "OneFact API",
            "version": APP_VERSION,
            "docs": "/docs" if get_config().is_development else "disabled",
        }

    return application


app = create_app()
