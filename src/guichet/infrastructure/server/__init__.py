"""
HTTP server lifecycle.
"""

from guichet.infrastructure.server.lifecycle import LifecycleController
from guichet.infrastructure.server.listener import bind_listener
from guichet.infrastructure.server.server_process import (
    EXIT_DEGRADED,
    EXIT_FATAL,
    EXIT_OK,
    ServerProcess,
    ServerState,
    ShutdownOutcome,
)

__all__ = [
    "EXIT_DEGRADED",
    "EXIT_FATAL",
    "EXIT_OK",
    "LifecycleController",
    "ServerProcess",
    "ServerState",
    "ShutdownOutcome",
    "bind_listener",
]
