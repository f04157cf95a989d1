"""Logging configuration and request access logging."""

from __future__ import annotations

import logging
import logging.config
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.base import RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

access_logger = logging.getLogger("shopapi.access")

QUIET_PATHS = frozenset({"/health"})


def configure_logging(level: str = "INFO") -> None:
    """Route ``shopapi`` loggers to stderr at ``level``."""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "shopapi": {
                    "handlers": ["stderr"],
                    "level": level,
                },
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration for each request.

    Bodies and headers are never logged; they carry credentials.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # The catch-all handler sits outside this middleware and renders the 500.
            duration_ms = (time.perf_counter() - start) * 1000
            access_logger.error("%s %s 500 %.1fms", request.method, path, duration_ms)
            raise
        duration_ms = (time.perf_counter() - start) * 1000

        status = response.status_code
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        access_logger.log(level, "%s %s %d %.1fms", request.method, path, status, duration_ms)
        return response
