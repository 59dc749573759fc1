"""
Unit tests for bind_listener.
"""

import socket

import pytest

from guichet.domain.exceptions import ListenerBindError
from guichet.infrastructure.server import bind_listener


class TestBindListener:
    """Unit tests for bind_listener."""

    def test_binds_ephemeral_port(self):
        """Test port 0 binds an OS-assigned port that accepts connections."""
        sock = bind_listener("127.0.0.1:0")
        try:
            host, port = sock.getsockname()[:2]
            assert host == "127.0.0.1"
            assert port > 0

            with socket.create_connection(("127.0.0.1", port), timeout=2):
                pass
        finally:
            sock.close()

    def test_non_numeric_port_fails_to_bind(self):
        """Test a malformed port surfaces as a bind failure."""
        with pytest.raises(ListenerBindError) as exc_info:
            bind_listener("127.0.0.1:not-a-port")

        assert exc_info.value.address == "127.0.0.1:not-a-port"

    def test_port_in_use_fails_to_bind(self):
        """Test binding a port another socket listens on fails."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as taken:
            taken.bind(("127.0.0.1", 0))
            taken.listen(1)
            port = taken.getsockname()[1]

            with pytest.raises(ListenerBindError) as exc_info:
                bind_listener(f"127.0.0.1:{port}")

        assert exc_info.value.code == "LISTENER_BIND_FAILED"
