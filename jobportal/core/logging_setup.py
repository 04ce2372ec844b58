"""
Logging setup and request logging middleware.

Provides:
- configure_logging(): root logger format/level from settings
- RequestLoggingMiddleware: one line per request with timing and request id
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Paths that would only add noise to the logs
SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def configure_logging(log_level: str = "INFO") -> None:
    """Configure the root logger once at startup."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status code and duration for every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        request.state.request_id = request_id

        if request.url.path in SKIP_PATHS:
            response = await call_next(request)
            response.headers["x-request-id"] = request_id
            return response

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "[%s] %s %s failed", request_id, request.method, request.url.path
            )
            raise

        duration_ms = round((time.time() - start_time) * 1000, 2)
        message = "[%s] %s %s -> %s (%sms)"
        args = (request_id, request.method, request.url.path, response.status_code, duration_ms)
        if response.status_code >= 500:
            logger.error(message, *args)
        elif response.status_code >= 400:
            logger.warning(message, *args)
        else:
            logger.info(message, *args)

        response.headers["x-request-id"] = request_id
        return response
