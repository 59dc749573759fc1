"""
Server lifecycle controller.

Binds the listener, serves the application until shutdown is requested,
then drains in-flight requests within the grace period.
"""

import asyncio
import contextlib
import socket
from typing import Iterator, Optional

import uvicorn
from starlette.types import ASGIApp

from guichet.domain.exceptions import (
    ListenerTerminatedError,
    ShutdownTimeoutError,
)
from guichet.infrastructure.monitoring import get_logger
from guichet.infrastructure.server.listener import bind_listener
from guichet.infrastructure.server.server_process import (
    ServerProcess,
    ShutdownOutcome,
)
from guichet.infrastructure.shutdown import ShutdownManager

logger = get_logger(__name__)

# Upper bound on waiting for the serving task after it was cancelled
CANCEL_WAIT_SECONDS = 1.0


class _Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to ShutdownManager."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class LifecycleController:
    """
    Drives a ServerProcess from STARTING to STOPPED.

    Sequence:
    1. Bind listener (STARTING -> SERVING)
    2. Serve connections concurrently in a dedicated task
    3. Block until shutdown is requested or the serving task ends
    4. Stop accepting connections (SERVING -> SHUTTING_DOWN)
    5. Race drain completion against the grace period
    6. Record the outcome (SHUTTING_DOWN -> STOPPED)

    Attributes:
        process: Server process record
        app: ASGI application (middleware chain + routes)
        shutdown_manager: Cancellation context set by signal handlers
    """

    def __init__(
        self,
        process: ServerProcess,
        app: ASGIApp,
        shutdown_manager: Optional[ShutdownManager] = None,
    ):
        """
        Initialize lifecycle controller.

        Args:
            process: Server process record (state STARTING)
            app: ASGI application to serve
            shutdown_manager: Shutdown context (created if None)
        """
        self.process = process
        self.app = app
        self.shutdown_manager = shutdown_manager or ShutdownManager(
            grace_period=process.grace_period
        )

        self.server: Optional[uvicorn.Server] = None
        self._socket: Optional[socket.socket] = None
        self._serve_task: Optional[asyncio.Task] = None

    # ================================================================
    # Startup
    # ================================================================

    def start_listener(self) -> socket.socket:
        """
        Bind the listener socket.

        Returns:
            Listening socket

        Raises:
            ListenerBindError: If binding fails (process is STOPPED)
        """
        try:
            self._socket = bind_listener(self.process.listen_address)
        except Exception:
            self.process.mark_stopped()
            raise

        bound_port = self._socket.getsockname()[1]
        self.process.mark_serving(bound_port)

        logger.info(
            f"Connect to http://localhost:{bound_port}/ for GraphQL playground"
        )
        logger.info(
            "Listen and serve",
            extra={"transport": "HTTP", "port": str(bound_port)},
        )
        return self._socket

    def _create_server(self) -> uvicorn.Server:
        """Create uvicorn server for the pre-bound socket."""
        config = uvicorn.Config(
            self.app,
            log_config=None,
            access_log=False,
            lifespan="off",
            timeout_graceful_shutdown=None,
        )
        return _Server(config)

    async def _serve(self, sock: socket.socket) -> None:
        """
        Serve connections until uvicorn exits.

        uvicorn reports startup failures with sys.exit; surface them as
        ListenerTerminatedError instead of unwinding the event loop.
        """
        try:
            await self.server.serve(sockets=[sock])
        except SystemExit as e:
            raise ListenerTerminatedError(
                f"server exited during startup (status {e.code})"
            ) from e

    # ================================================================
    # Main flow
    # ================================================================

    async def run(self) -> ShutdownOutcome:
        """
        Run the server until shutdown completes.

        Returns:
            Shutdown outcome

        Raises:
            ListenerBindError: If the listener cannot be bound
            ListenerTerminatedError: If serving stops without a
                shutdown request
        """
        sock = self.start_listener()

        self.server = self._create_server()
        self._serve_task = asyncio.create_task(
            self._serve(sock), name="guichet-serve"
        )
        shutdown_wait = asyncio.create_task(
            self.shutdown_manager.wait_for_shutdown(),
            name="guichet-shutdown-wait",
        )

        await asyncio.wait(
            {self._serve_task, shutdown_wait},
            return_when=asyncio.FIRST_COMPLETED,
        )

        if not shutdown_wait.done():
            shutdown_wait.cancel()
            self._close_listener()
            self.process.mark_stopped()
            raise self._termination_error()

        return await self.shutdown(shutdown_wait.result())

    def _termination_error(self) -> ListenerTerminatedError:
        """Build the error for a serving task that ended on its own."""
        task = self._serve_task

        if task.cancelled():
            return ListenerTerminatedError("serving task cancelled")

        exc = task.exception()
        if isinstance(exc, ListenerTerminatedError):
            return exc
        if exc is not None:
            error = ListenerTerminatedError(f"{type(exc).__name__}: {exc}")
            error.__cause__ = exc
            return error

        return ListenerTerminatedError()

    # ================================================================
    # Shutdown
    # ================================================================

    def _stop_accepting(self) -> None:
        """Close listening sockets; accepted connections keep running."""
        if self.server is None:
            return

        # servers is empty until uvicorn finishes startup; should_exit
        # covers that window
        self.server.should_exit = True
        for listener in self.server.servers:
            listener.close()

    def _close_listener(self) -> None:
        """Release the listening socket once serving has ended."""
        for listener in self.server.servers:
            listener.close()
        if self._socket is not None:
            self._socket.close()

    async def shutdown(self, reason: str) -> ShutdownOutcome:
        """
        Drain in-flight requests within the grace period.

        Args:
            reason: What triggered shutdown (e.g. "SIGTERM")

        Returns:
            CLEAN if everything drained, TIMED_OUT if the grace period
            elapsed first, FAILED if the server errored while draining
        """
        grace_period = self.process.grace_period

        self.process.begin_shutdown(reason)
        self._stop_accepting()

        logger.info(
            f"SIGNAL {reason} received, then shutting down...",
            extra={"timeout": grace_period},
        )

        grace_timer = asyncio.create_task(
            asyncio.sleep(grace_period), name="guichet-grace-timer"
        )
        await asyncio.wait(
            {self._serve_task, grace_timer},
            return_when=asyncio.FIRST_COMPLETED,
        )

        if self._serve_task.done():
            grace_timer.cancel()
            outcome = self._drain_outcome()
        else:
            error = ShutdownTimeoutError(grace_period)
            logger.error(
                "Failed to gracefully shutdown",
                extra={"error": error.message},
            )
            await self._abandon_serving()
            outcome = ShutdownOutcome.TIMED_OUT

        self._close_listener()
        self.process.mark_stopped(outcome)

        if outcome is ShutdownOutcome.CLEAN:
            logger.info("Server stopped", extra={"outcome": outcome.value})

        return outcome

    def _drain_outcome(self) -> ShutdownOutcome:
        """Outcome of a serving task that finished during shutdown."""
        task = self._serve_task

        if task.cancelled():
            return ShutdownOutcome.FAILED

        exc = task.exception()
        if exc is not None:
            logger.error(
                "Failed to gracefully shutdown",
                extra={"error": f"{type(exc).__name__}: {exc}"},
            )
            return ShutdownOutcome.FAILED

        return ShutdownOutcome.CLEAN

    async def _abandon_serving(self) -> None:
        """Stop waiting for outstanding requests."""
        self.server.force_exit = True
        self._serve_task.cancel()

        await asyncio.wait({self._serve_task}, timeout=CANCEL_WAIT_SECONDS)

        if self._serve_task.done() and not self._serve_task.cancelled():
            # Retrieve to keep asyncio from reporting it as unhandled
            self._serve_task.exception()
