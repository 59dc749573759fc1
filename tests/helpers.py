"""
Shared test helpers.
"""

import asyncio
import socket

from guichet.config.settings import Settings
from guichet.infrastructure.server import ServerProcess, ServerState

ALLOWED_ORIGIN = "http://localhost:8080"
DISALLOWED_ORIGIN = "http://evil.example"


def make_settings(**overrides) -> Settings:
    """Settings for tests: loopback host, ephemeral port."""
    values = {
        "ENV": "test",
        "API_HOST": "127.0.0.1",
        "PORT": "0",
        "SHUTDOWN_GRACE_PERIOD": 5.0,
    }
    values.update(overrides)
    return Settings(**values)


def free_port() -> int:
    """Reserve and release an ephemeral port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


async def wait_for_state(
    process: ServerProcess,
    state: ServerState,
    timeout: float = 5.0,
) -> None:
    """Poll until the process reaches state."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while process.state is not state:
        if loop.time() > deadline:
            raise AssertionError(
                f"process stuck in {process.state.value}, expected {state.value}"
            )
        await asyncio.sleep(0.01)


async def wait_for_port(port: int, timeout: float = 10.0) -> None:
    """Poll until something accepts connections on 127.0.0.1:port."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while True:
        try:
            _, writer = await asyncio.open_connection("127.0.0.1", port)
        except OSError:
            if loop.time() > deadline:
                raise AssertionError(f"nothing listening on port {port}")
            await asyncio.sleep(0.05)
            continue
        writer.close()
        await writer.wait_closed()
        return
