"""
Cross-origin policy enforcement.
"""

from typing import Sequence

from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from guichet.presentation.api.middleware.request_id_middleware import (
    REQUEST_ID_HEADER,
)

DEFAULT_ALLOWED_METHODS = ("GET", "POST", "HEAD")
DEFAULT_ALLOWED_HEADERS = (
    "Accept",
    "Content-Type",
    "Origin",
    "X-Requested-With",
    REQUEST_ID_HEADER,
)


def _is_same_origin(scope: Scope, headers: Headers, origin: str) -> bool:
    """Check whether origin is the server's own scheme and host."""
    host = headers.get("host")
    if not host:
        return False
    return origin.rstrip("/").lower() == f"{scope['scheme']}://{host}".lower()


class CORSPolicyMiddleware(CORSMiddleware):
    """
    CORS middleware that also rejects disallowed actual requests.

    Starlette answers disallowed preflights with 400 but lets actual
    requests through without CORS headers. Here a cross-origin request
    whose Origin is not allow-listed gets 403 and never reaches the
    routed handler. Same-origin requests and requests without an Origin
    header pass untouched.
    """

    def __init__(
        self,
        app: ASGIApp,
        allow_origins: Sequence[str] = (),
        allow_credentials: bool = True,
        allow_methods: Sequence[str] = DEFAULT_ALLOWED_METHODS,
        allow_headers: Sequence[str] = DEFAULT_ALLOWED_HEADERS,
    ):
        super().__init__(
            app,
            allow_origins=allow_origins,
            allow_methods=allow_methods,
            allow_headers=allow_headers,
            allow_credentials=allow_credentials,
            expose_headers=[REQUEST_ID_HEADER],
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            headers = Headers(scope=scope)
            origin = headers.get("origin")
            is_preflight = (
                scope["method"] == "OPTIONS"
                and "access-control-request-method" in headers
            )

            if (
                origin is not None
                and not is_preflight
                and not self.is_allowed_origin(origin=origin)
                and not _is_same_origin(scope, headers, origin)
            ):
                response = PlainTextResponse(
                    "Disallowed CORS origin", status_code=403
                )
                await response(scope, receive, send)
                return

        await super().__call__(scope, receive, send)
