"""Main FastAPI application."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from topicsync.api import build_api_router, health_router
from topicsync.core.config import Settings, get_settings
from topicsync.core.exceptions import TopicSyncError, WebhookAuthenticationError
from topicsync.core.logging import configure_logging, get_logger, set_correlation_id
from topicsync.database.session import (
    create_engine_from_settings,
    create_session_factory,
    init_db,
)
from topicsync.services.hooks import HookRegistry, get_hook_registry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    if app.state.settings.database_create_tables:
        await init_db(app.state.engine)
        logger.info("Database tables created", database_url=app.state.engine.url.render_as_string())

    yield

    # Shutdown
    await app.state.engine.dispose()


def create_app(
    settings: Optional[Settings] = None,
    hooks: Optional[HookRegistry] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use; defaults to the environment
        hooks: Hook registry to use; defaults to the process-wide one

    Returns:
        Configured application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Discourse topic to post metadata sync",
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.hooks = hooks if hooks is not None else get_hook_registry()
    app.state.engine = create_engine_from_settings(settings)
    app.state.session_factory = create_session_factory(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        """Add correlation ID to requests."""
        correlation_id = set_correlation_id(
            request.headers.get(settings.log_correlation_id_header)
        )

        response = await call_next(request)
        response.headers[settings.log_correlation_id_header] = correlation_id
        return response

    @app.exception_handler(WebhookAuthenticationError)
    async def webhook_auth_exception_handler(request: Request, exc: WebhookAuthenticationError):
        """Reject unverified webhooks without revealing why."""
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"code": exc.code, "message": exc.message},
        )

    @app.exception_handler(TopicSyncError)
    async def topicsync_exception_handler(request: Request, exc: TopicSyncError):
        """Handle TopicSync exceptions."""
        logger.error("Request failed", code=exc.code, error=exc.message, path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"code": exc.code, "message": exc.message},
        )

    app.include_router(
        build_api_router(use_discourse_webhook=settings.use_discourse_webhook),
        prefix=settings.api_prefix,
    )
    app.include_router(health_router, tags=["health"])

    if not settings.use_discourse_webhook:
        logger.info("Discourse webhook route disabled")

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(level=settings.log_level, format=settings.log_format)

    uvicorn.run(
        "topicsync.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
