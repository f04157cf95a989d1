"""FastAPI application entrypoint for shopapi."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopapi.api.products import router as products_router
from shopapi.api.users import router as users_router
from shopapi.core.config import get_settings
from shopapi.core.context import AppContext
from shopapi.core.context import build_context
from shopapi.core.errors import register_error_handlers
from shopapi.core.logging import RequestLoggingMiddleware
from shopapi.core.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(context: AppContext | None = None) -> FastAPI:
    """Build the application.

    The context is built from the environment at startup unless one is
    supplied, and closed at shutdown either way.
    """
    settings = context.settings if context is not None else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        app_context = context if context is not None else build_context(settings)
        app.state.context = app_context
        logger.info("Starting shopapi with settings=%s", settings.safe_for_logging())
        try:
            yield
        finally:
            app_context.close()
            logger.info("Stopped shopapi")

    app = FastAPI(title="shopapi", version="1.0.0", lifespan=lifespan)
    register_error_handlers(app)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(users_router)
    app.include_router(products_router)

    @app.get("/", tags=["health"])
    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        """Health check endpoint for service readiness."""
        return {"status": "ok"}

    return app


app = create_app()


def serve() -> None:
    """Run the API with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("shopapi.main:app", host=settings.host, port=settings.port)
