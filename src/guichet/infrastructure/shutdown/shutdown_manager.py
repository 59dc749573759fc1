"""
Graceful shutdown manager.

Handles:
- Signal registration (SIGTERM, SIGINT)
- Shutdown request tracking
- Waking the lifecycle controller when shutdown is requested
"""

import asyncio
import signal
from datetime import datetime, timezone
from typing import Optional, Tuple

from guichet.infrastructure.monitoring import get_logger

logger = get_logger(__name__)

HANDLED_SIGNALS: Tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class ShutdownManager:
    """
    Cancellation context for the server process.

    Signal handlers (or callers) request shutdown; the lifecycle
    controller blocks on `wait_for_shutdown` instead of on raw OS
    primitives.

    Attributes:
        grace_period: Seconds in-flight requests get to finish
        reason: What triggered shutdown (signal name or caller-provided)
        shutdown_started_at: Timestamp when shutdown was requested
    """

    def __init__(self, grace_period: float = 60.0):
        """
        Initialize shutdown manager.

        Args:
            grace_period: Seconds in-flight requests get to finish
        """
        self.grace_period = grace_period

        self.reason: Optional[str] = None
        self.shutdown_started_at: Optional[datetime] = None
        self._shutdown_event = asyncio.Event()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def is_shutting_down(self) -> bool:
        """
        Check if shutdown has been requested.

        Returns:
            True if shutting down, False otherwise
        """
        return self._shutdown_event.is_set()

    def setup_signal_handlers(self) -> None:
        """
        Register SIGINT and SIGTERM on the running event loop.

        Both signals trigger the same shutdown sequence. Must be called
        from the main thread with a running loop.
        """
        self._loop = asyncio.get_running_loop()

        for sig in HANDLED_SIGNALS:
            self._loop.add_signal_handler(sig, self._handle_signal, sig)

        logger.debug("Signal handlers registered for graceful shutdown")

    def restore_signal_handlers(self) -> None:
        """Remove the handlers installed by setup_signal_handlers."""
        if self._loop is None:
            return

        for sig in HANDLED_SIGNALS:
            self._loop.remove_signal_handler(sig)

        self._loop = None

    def _handle_signal(self, sig: signal.Signals) -> None:
        """
        Handle shutdown signal.

        Args:
            sig: Signal received
        """
        self.initiate_shutdown(signal.Signals(sig).name)

    def initiate_shutdown(self, reason: str = "manual") -> bool:
        """
        Request shutdown.

        Only the first request is recorded; later ones are ignored.

        Args:
            reason: Reason for shutdown (signal name, manual, etc.)

        Returns:
            True if this call started the shutdown
        """
        if self._shutdown_event.is_set():
            logger.debug(f"Shutdown already in progress, ignoring {reason}")
            return False

        self.reason = reason
        self.shutdown_started_at = datetime.now(timezone.utc)
        self._shutdown_event.set()
        return True

    async def wait_for_shutdown(self) -> str:
        """
        Wait for shutdown to be requested.

        Returns:
            Shutdown reason
        """
        await self._shutdown_event.wait()
        return self.reason or "manual"

    def get_shutdown_info(self) -> dict:
        """
        Get shutdown status information.

        Returns:
            Dictionary with shutdown status details
        """
        return {
            "is_shutting_down": self.is_shutting_down(),
            "reason": self.reason,
            "shutdown_started_at": (
                self.shutdown_started_at.isoformat()
                if self.shutdown_started_at
                else None
            ),
            "grace_period": self.grace_period,
        }
