"""
Unit tests for ServerProcess.

Tests lifecycle transitions, frozen configuration and exit codes.
"""

from datetime import timezone

import pytest

from guichet.domain.exceptions import InvalidStateTransitionError
from guichet.infrastructure.server import (
    EXIT_DEGRADED,
    EXIT_FATAL,
    EXIT_OK,
    ServerProcess,
    ServerState,
    ShutdownOutcome,
)
from guichet.infrastructure.server.server_process import split_address


def _process(**overrides) -> ServerProcess:
    values = {
        "listen_address": "0.0.0.0:8080",
        "middleware_chain": ["request_id", "logging", "access_log", "cors"],
        "route_table": {"/": "playground", "/query": "graphql"},
        "grace_period": 60.0,
    }
    values.update(overrides)
    return ServerProcess(**values)


class TestServerProcess:
    """Unit tests for ServerProcess."""

    # ================================================================
    # Construction
    # ================================================================

    def test_initial_state(self):
        """Test process starts in STARTING with no outcome."""
        process = _process()

        assert process.state is ServerState.STARTING
        assert process.bound_port is None
        assert process.shutdown_reason is None
        assert process.shutdown_outcome is None
        assert process.host == "0.0.0.0"
        assert process.port == "8080"

    def test_middleware_chain_is_frozen(self):
        """Test chain is copied into an ordered tuple."""
        chain = ["request_id", "logging"]
        process = _process(middleware_chain=chain)

        chain.append("late")

        assert process.middleware_chain == ("request_id", "logging")

    def test_route_table_is_read_only(self):
        """Test route table cannot be modified."""
        process = _process()

        with pytest.raises(TypeError):
            process.route_table["/extra"] = "handler"

        assert set(process.route_table) == {"/", "/query"}

    # ================================================================
    # Transitions
    # ================================================================

    def test_full_lifecycle(self):
        """Test STARTING -> SERVING -> SHUTTING_DOWN -> STOPPED."""
        process = _process()

        process.mark_serving(8080)
        assert process.state is ServerState.SERVING
        assert process.bound_port == 8080

        process.begin_shutdown("SIGTERM")
        assert process.state is ServerState.SHUTTING_DOWN
        assert process.shutdown_reason == "SIGTERM"

        process.mark_stopped(ShutdownOutcome.CLEAN)
        assert process.state is ServerState.STOPPED
        assert process.shutdown_outcome is ShutdownOutcome.CLEAN

        assert [state for state, _ in process.history] == [
            ServerState.STARTING,
            ServerState.SERVING,
            ServerState.SHUTTING_DOWN,
            ServerState.STOPPED,
        ]

    def test_history_records_utc_entry_times(self):
        """Test each history entry pairs a state with a UTC timestamp, in order."""
        process = _process()
        process.mark_serving(8080)

        (first, started_at), (second, serving_at) = process.history

        assert (first, second) == (ServerState.STARTING, ServerState.SERVING)
        assert started_at.tzinfo is timezone.utc
        assert started_at <= serving_at

    def test_cannot_shut_down_before_serving(self):
        """Test STARTING -> SHUTTING_DOWN is rejected."""
        process = _process()

        with pytest.raises(InvalidStateTransitionError):
            process.begin_shutdown("SIGINT")

        assert process.state is ServerState.STARTING

    def test_cannot_go_backwards(self):
        """Test SERVING -> STARTING is rejected."""
        process = _process()
        process.mark_serving(8080)

        with pytest.raises(InvalidStateTransitionError):
            process.transition_to(ServerState.STARTING)

    def test_cannot_shut_down_twice(self):
        """Test SHUTTING_DOWN -> SHUTTING_DOWN is rejected."""
        process = _process()
        process.mark_serving(8080)
        process.begin_shutdown("SIGTERM")

        with pytest.raises(InvalidStateTransitionError):
            process.begin_shutdown("SIGINT")

        assert process.shutdown_reason == "SIGTERM"

    def test_stopped_is_terminal(self):
        """Test nothing follows STOPPED."""
        process = _process()
        process.mark_stopped()

        with pytest.raises(InvalidStateTransitionError):
            process.mark_stopped()

    def test_listener_failure_stops_from_starting_or_serving(self):
        """Test STARTING/SERVING may abort straight to STOPPED."""
        never_bound = _process()
        never_bound.mark_stopped()
        assert never_bound.state is ServerState.STOPPED

        crashed = _process()
        crashed.mark_serving(8080)
        crashed.mark_stopped()
        assert crashed.state is ServerState.STOPPED

    # ================================================================
    # Exit codes
    # ================================================================

    @pytest.mark.parametrize(
        "outcome, expected",
        [
            (ShutdownOutcome.CLEAN, EXIT_OK),
            (ShutdownOutcome.TIMED_OUT, EXIT_DEGRADED),
            (ShutdownOutcome.FAILED, EXIT_DEGRADED),
        ],
    )
    def test_exit_code_per_outcome(self, outcome, expected):
        """Test exit status reflects shutdown outcome."""
        process = _process()
        process.mark_serving(8080)
        process.begin_shutdown("SIGTERM")
        process.mark_stopped(outcome)

        assert process.exit_code == expected

    def test_exit_code_without_outcome_is_fatal(self):
        """Test a listener failure exits non-zero."""
        process = _process()
        process.mark_stopped()

        assert process.exit_code == EXIT_FATAL


class TestSplitAddress:
    """Unit tests for split_address."""

    @pytest.mark.parametrize(
        "address, expected",
        [
            ("0.0.0.0:8080", ("0.0.0.0", "8080")),
            (":8080", ("", "8080")),
            ("[::1]:9999", ("::1", "9999")),
            ("localhost:http", ("localhost", "http")),
        ],
    )
    def test_split(self, address, expected):
        """Test host and port are separated on the last colon."""
        assert split_address(address) == expected
