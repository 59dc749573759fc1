"""
Middleware chain assembly.

Order matters: the request id must exist before the logger is bound,
the logger must be bound before access logging uses it, and CORS runs
last so disallowed origins never reach a handler.
"""

from typing import Tuple

from starlette.middleware import Middleware

from guichet.config.settings import Settings
from guichet.presentation.api.middleware.cors_middleware import (
    CORSPolicyMiddleware,
)
from guichet.presentation.api.middleware.logging_middleware import (
    AccessLogMiddleware,
    LoggingContextMiddleware,
)
from guichet.presentation.api.middleware.request_id_middleware import (
    RequestIDMiddleware,
)


def build_middleware_chain(settings: Settings) -> Tuple[Middleware, ...]:
    """
    Build the request middleware chain, outermost first.

    Args:
        settings: Application settings

    Returns:
        Immutable ordered chain for FastAPI(middleware=...)
    """
    return (
        # 1. Request ID (FIRST for tracking)
        Middleware(RequestIDMiddleware),
        # 2. Logger bound to the request id
        Middleware(LoggingContextMiddleware),
        # 3. Access log once the request completes
        Middleware(AccessLogMiddleware, level=settings.access_log_level),
        # 4. CORS (LAST, right before routing)
        Middleware(
            CORSPolicyMiddleware,
            allow_origins=list(settings.CORS_ALLOWED_ORIGINS),
            allow_credentials=True,
        ),
    )
