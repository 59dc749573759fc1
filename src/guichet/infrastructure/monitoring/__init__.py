"""
Monitoring infrastructure for Guichet.

Provides structured logging and request context tracking.
"""

from guichet.infrastructure.monitoring.logger import (
    ContextLoggerAdapter,
    JSONFormatter,
    bind_request_logger,
    get_logger,
    get_request_id,
    get_request_logger,
    set_request_id,
    setup_logging,
    with_request_id,
)

__all__ = [
    "ContextLoggerAdapter",
    "JSONFormatter",
    "bind_request_logger",
    "get_logger",
    "get_request_id",
    "get_request_logger",
    "set_request_id",
    "setup_logging",
    "with_request_id",
]
