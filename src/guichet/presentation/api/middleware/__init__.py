"""
API middleware for Guichet.
"""

from guichet.presentation.api.middleware.chain import build_middleware_chain
from guichet.presentation.api.middleware.cors_middleware import (
    CORSPolicyMiddleware,
)
from guichet.presentation.api.middleware.logging_middleware import (
    AccessLogMiddleware,
    LoggingContextMiddleware,
)
from guichet.presentation.api.middleware.request_id_middleware import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
)

__all__ = [
    "build_middleware_chain",
    "CORSPolicyMiddleware",
    "AccessLogMiddleware",
    "LoggingContextMiddleware",
    "REQUEST_ID_HEADER",
    "RequestIDMiddleware",
]
