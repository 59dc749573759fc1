"""
Unit tests for lifecycle exceptions.
"""

from guichet.domain.exceptions import (
    GuichetException,
    InvalidStateTransitionError,
    LifecycleError,
    ListenerBindError,
    ListenerTerminatedError,
    ShutdownTimeoutError,
)


class TestLifecycleExceptions:
    """Unit tests for lifecycle exceptions."""

    def test_base_exception_defaults_code_to_class_name(self):
        """Test code falls back to the class name."""
        exc = GuichetException("boom")

        assert exc.message == "boom"
        assert exc.code == "GuichetException"
        assert str(exc) == "boom"

    def test_listener_bind_error(self):
        """Test bind error carries address and reason."""
        exc = ListenerBindError("0.0.0.0:80", "Permission denied")

        assert isinstance(exc, LifecycleError)
        assert exc.code == "LISTENER_BIND_FAILED"
        assert exc.address == "0.0.0.0:80"
        assert "0.0.0.0:80" in exc.message
        assert "Permission denied" in exc.message

    def test_listener_terminated_error(self):
        """Test terminated error has a default reason."""
        exc = ListenerTerminatedError()

        assert exc.code == "LISTENER_TERMINATED"
        assert exc.reason == "listener closed unexpectedly"

    def test_shutdown_timeout_error(self):
        """Test timeout error mentions the grace period."""
        exc = ShutdownTimeoutError(60.0)

        assert exc.code == "SHUTDOWN_TIMEOUT"
        assert exc.grace_period == 60.0
        assert "60.0s" in exc.message

    def test_invalid_state_transition_error(self):
        """Test transition error names both states."""
        exc = InvalidStateTransitionError("serving", "starting")

        assert exc.code == "INVALID_STATE_TRANSITION"
        assert exc.message == "Invalid server state transition: serving -> starting"
