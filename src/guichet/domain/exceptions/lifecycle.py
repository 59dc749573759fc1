"""
Server lifecycle exceptions.
"""

from guichet.domain.exceptions.base import GuichetException


class LifecycleError(GuichetException):
    """Base exception for server lifecycle errors."""


class ListenerBindError(LifecycleError):
    """Raised when the listener socket cannot be bound."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(
            f"Listen failed on {address}: {reason}",
            code="LISTENER_BIND_FAILED",
        )


class ListenerTerminatedError(LifecycleError):
    """Raised when the listener stops without a shutdown request."""

    def __init__(self, reason: str = "listener closed unexpectedly"):
        self.reason = reason
        super().__init__(
            f"Listener terminated: {reason}",
            code="LISTENER_TERMINATED",
        )


class ShutdownTimeoutError(LifecycleError):
    """Raised when in-flight requests outlive the grace period."""

    def __init__(self, grace_period: float):
        self.grace_period = grace_period
        super().__init__(
            f"Graceful shutdown exceeded {grace_period}s grace period",
            code="SHUTDOWN_TIMEOUT",
        )


class InvalidStateTransitionError(LifecycleError):
    """Raised when the server process moves to a state out of order."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f"Invalid server state transition: {current} -> {target}",
            code="INVALID_STATE_TRANSITION",
        )
