"""
Structured logging configuration.

Request-scoped values (request id, bound logger) travel in context
variables so that every record emitted while serving a request can be
correlated with it.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any, MutableMapping, Optional, Union
from uuid import uuid4

# Context variable for request ID tracking
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Context variable for the request-scoped logger
request_logger_ctx: ContextVar[Optional["RequestLogger"]] = ContextVar(
    "request_logger", default=None
)

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName", "color_message"}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect fields passed through `extra` on a log record."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that merges bound context into per-call extras.

    The stdlib adapter replaces call-site extras with its own; this one
    keeps both, call-site values winning.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


RequestLogger = Union[logging.Logger, ContextLoggerAdapter]


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in JSON format with consistent schema.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Fields bound through `extra` (request_id, method, status, ...)
        log_data.update(_extra_fields(record))

        # Fall back to the request context if nothing was bound
        if "request_id" not in log_data:
            request_id = request_id_ctx.get()
            if request_id:
                log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Plain formatter that appends extra fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _extra_fields(record)
        if fields:
            pairs = " ".join(f"{key}={value}" for key, value in fields.items())
            line = f"{line} | {pairs}"
        return line


def setup_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure application logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Use JSON format (True) or plain text (False)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_logs:
        formatter: logging.Formatter = JSONFormatter(datefmt="%Y-%m-%dT%H:%M:%S")
    else:
        formatter = TextFormatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Silence noisy loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    # uvicorn logs through the root handlers; the middleware chain owns
    # access logging
    for name in ("uvicorn", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
    logging.getLogger("uvicorn.access").disabled = True


def get_logger(name: str) -> logging.Logger:
    """
    Get logger with given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Set request ID for current context.

    Args:
        request_id: Request ID (generates UUID if None)

    Returns:
        Request ID that was set
    """
    if request_id is None:
        request_id = str(uuid4())
    request_id_ctx.set(request_id)
    return request_id


def get_request_id() -> Optional[str]:
    """
    Get request ID from current context.

    Returns:
        Request ID or None
    """
    return request_id_ctx.get()


def with_request_id(
    logger: logging.Logger, request_id: Optional[str]
) -> RequestLogger:
    """
    Derive a logger carrying the request id.

    Args:
        logger: Base logger
        request_id: Request id, may be None or empty

    Returns:
        The base logger unchanged when there is no request id,
        otherwise an adapter that adds `request_id` to every record
    """
    if not request_id:
        return logger
    return ContextLoggerAdapter(logger, {"request_id": request_id})


def bind_request_logger(logger: RequestLogger) -> None:
    """Make logger the request-scoped logger for the current context."""
    request_logger_ctx.set(logger)


def get_request_logger(default: Optional[logging.Logger] = None) -> RequestLogger:
    """
    Get the request-scoped logger.

    Args:
        default: Logger to return outside of a request

    Returns:
        Bound logger, or default (the package logger if None)
    """
    bound = request_logger_ctx.get()
    if bound is not None:
        return bound
    return default or logging.getLogger("guichet")
