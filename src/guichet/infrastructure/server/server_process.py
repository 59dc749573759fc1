"""
Server process record.

One instance is created by the entry point and passed by reference to
the listener-start and shutdown routines.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from guichet.domain.exceptions import InvalidStateTransitionError


class ServerState(Enum):
    """Lifecycle state of the server process."""

    STARTING = "starting"
    SERVING = "serving"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class ShutdownOutcome(Enum):
    """How the shutdown sequence ended."""

    CLEAN = "clean"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


# Exit status per shutdown outcome
EXIT_OK = 0
EXIT_FATAL = 1
EXIT_DEGRADED = 2

_EXIT_CODES = {
    ShutdownOutcome.CLEAN: EXIT_OK,
    ShutdownOutcome.TIMED_OUT: EXIT_DEGRADED,
    ShutdownOutcome.FAILED: EXIT_DEGRADED,
}

_NEXT_STATE = {
    ServerState.STARTING: ServerState.SERVING,
    ServerState.SERVING: ServerState.SHUTTING_DOWN,
    ServerState.SHUTTING_DOWN: ServerState.STOPPED,
}


@dataclass
class ServerProcess:
    """
    State of the single HTTP server owned by the process.

    The middleware chain and route table are frozen on construction.
    State only moves forward: STARTING -> SERVING -> SHUTTING_DOWN ->
    STOPPED. STOPPED is also reachable directly from STARTING and
    SERVING when the listener fails; shutdown_outcome stays None then.

    Attributes:
        listen_address: "host:port" the listener binds to
        middleware_chain: Ordered request stages, outermost first
        route_table: Path -> handler mapping
        grace_period: Seconds in-flight requests get during shutdown
        state: Current lifecycle state
        bound_port: Port actually bound (differs from the configured
            port when it is 0)
        shutdown_reason: What triggered shutdown
        shutdown_outcome: Set once STOPPED is reached after shutdown
        history: (state, UTC time entered) for every state visited,
            in order
    """

    listen_address: str
    middleware_chain: Sequence[Any]
    route_table: Mapping[str, Any]
    grace_period: float
    state: ServerState = ServerState.STARTING
    bound_port: Optional[int] = None
    shutdown_reason: Optional[str] = None
    shutdown_outcome: Optional[ShutdownOutcome] = None
    history: List[Tuple[ServerState, datetime]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.middleware_chain = tuple(self.middleware_chain)
        self.route_table = MappingProxyType(dict(self.route_table))
        self.history.append((self.state, datetime.now(timezone.utc)))

    @property
    def host(self) -> str:
        """Host part of the listen address."""
        return split_address(self.listen_address)[0]

    @property
    def port(self) -> str:
        """Port part of the listen address, as configured."""
        return split_address(self.listen_address)[1]

    def transition_to(self, target: ServerState) -> None:
        """
        Move to the next lifecycle state.

        Args:
            target: State to enter

        Raises:
            InvalidStateTransitionError: If target is not the next state
        """
        allowed = _NEXT_STATE.get(self.state)
        aborted = (
            target is ServerState.STOPPED and self.state is not ServerState.STOPPED
        )
        if target is not allowed and not aborted:
            raise InvalidStateTransitionError(self.state.value, target.value)

        self.state = target
        self.history.append((target, datetime.now(timezone.utc)))

    def mark_serving(self, bound_port: int) -> None:
        """Listener is bound and listening."""
        self.bound_port = bound_port
        self.transition_to(ServerState.SERVING)

    def begin_shutdown(self, reason: str) -> None:
        """Termination was requested; stop accepting new connections."""
        self.transition_to(ServerState.SHUTTING_DOWN)
        self.shutdown_reason = reason

    def mark_stopped(self, outcome: Optional[ShutdownOutcome] = None) -> None:
        """Shutdown finished, or the listener failed."""
        self.transition_to(ServerState.STOPPED)
        self.shutdown_outcome = outcome

    @property
    def exit_code(self) -> int:
        """Process exit status for the shutdown outcome."""
        if self.shutdown_outcome is None:
            return EXIT_FATAL
        return _EXIT_CODES[self.shutdown_outcome]


def split_address(address: str) -> Tuple[str, str]:
    """
    Split "host:port" into its parts.

    IPv6 hosts may be bracketed ("[::1]:8080"). The port is returned
    as-is, without validation.
    """
    host, _, port = address.rpartition(":")
    return host.strip("[]"), port
