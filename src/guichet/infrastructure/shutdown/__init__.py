"""
Shutdown coordination.
"""

from guichet.infrastructure.shutdown.shutdown_manager import (
    HANDLED_SIGNALS,
    ShutdownManager,
)

__all__ = ["HANDLED_SIGNALS", "ShutdownManager"]
