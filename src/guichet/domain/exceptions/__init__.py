"""
Domain exceptions package.
"""

# Base exceptions
from guichet.domain.exceptions.base import GuichetException

# Lifecycle exceptions
from guichet.domain.exceptions.lifecycle import (
    InvalidStateTransitionError,
    LifecycleError,
    ListenerBindError,
    ListenerTerminatedError,
    ShutdownTimeoutError,
)

__all__ = [
    # Base
    "GuichetException",
    # Lifecycle
    "LifecycleError",
    "ListenerBindError",
    "ListenerTerminatedError",
    "ShutdownTimeoutError",
    "InvalidStateTransitionError",
]
