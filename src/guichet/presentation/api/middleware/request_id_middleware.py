"""
Request ID middleware for request tracking.
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from guichet.infrastructure.monitoring.logger import set_request_id

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to generate or propagate request IDs.

    Stores the ID in the request context and on request.state, and
    adds the X-Request-ID header to responses.
    No logging - keeps middleware lean and focused.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request with ID tracking.

        Args:
            request: FastAPI request
            call_next: Next middleware/handler

        Returns:
            Response with X-Request-ID header
        """
        # Propagate incoming ID or generate one
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        request_id = set_request_id(incoming or None)
        request.state.request_id = request_id

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id

        return response
