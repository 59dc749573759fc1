"""
Request-scoped logging middleware.

Binds a logger enriched with the request id for the duration of the
request, and emits one access record per completed request.
"""

import logging
import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from guichet.infrastructure.monitoring.logger import (
    bind_request_logger,
    get_logger,
    get_request_id,
    get_request_logger,
    with_request_id,
)

ACCESS_LOGGER_NAME = "guichet.access"


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that binds a request-scoped logger.

    The bound logger carries request_id when the request has one; the
    base logger is used unchanged otherwise.
    """

    def __init__(self, app: ASGIApp, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger(ACCESS_LOGGER_NAME)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Bind logger for downstream stages.

        Args:
            request: FastAPI request
            call_next: Next middleware/handler

        Returns:
            Response from handler
        """
        request_id = getattr(request.state, "request_id", None) or get_request_id()
        request_logger = with_request_id(self.logger, request_id)

        bind_request_logger(request_logger)
        request.state.logger = request_logger

        return await call_next(request)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log completed requests.

    Records method, path, status and latency at a fixed level after the
    handler returns.
    """

    def __init__(self, app: ASGIApp, level: int = logging.INFO):
        super().__init__(app)
        self.level = level

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request and log it once complete.

        Args:
            request: FastAPI request
            call_next: Next middleware/handler

        Returns:
            Response from handler
        """
        request_logger = getattr(request.state, "logger", None) or get_request_logger(
            get_logger(ACCESS_LOGGER_NAME)
        )
        method = request.method
        path = request.url.path

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self._log(request_logger, method, path, 500, start_time)
            raise

        self._log(request_logger, method, path, response.status_code, start_time)
        return response

    def _log(
        self,
        request_logger,
        method: str,
        path: str,
        status: int,
        start_time: float,
    ) -> None:
        latency_ms = (time.perf_counter() - start_time) * 1000
        request_logger.log(
            self.level,
            "request",
            extra={
                "method": method,
                "path": path,
                "status": status,
                "latency_ms": round(latency_ms, 2),
            },
        )
