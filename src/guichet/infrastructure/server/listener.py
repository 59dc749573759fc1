"""
Listener socket creation.
"""

import socket

from guichet.domain.exceptions import ListenerBindError
from guichet.infrastructure.server.server_process import split_address

DEFAULT_BACKLOG = 2048


def bind_listener(address: str, backlog: int = DEFAULT_BACKLOG) -> socket.socket:
    """
    Bind and listen on a TCP socket.

    The port goes through getaddrinfo untouched, so a malformed value
    fails here rather than at configuration time.

    Args:
        address: "host:port"; an empty host binds all interfaces
        backlog: Pending connection queue length

    Returns:
        Listening socket

    Raises:
        ListenerBindError: If the address cannot be resolved or bound
    """
    host, port = split_address(address)

    try:
        family, socktype, proto, _, sockaddr = socket.getaddrinfo(
            host or None,
            port,
            type=socket.SOCK_STREAM,
            flags=socket.AI_PASSIVE,
        )[0]

        sock = socket.socket(family, socktype, proto)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(sockaddr)
            sock.listen(backlog)
        except OSError:
            sock.close()
            raise

    except (OSError, UnicodeError) as e:
        raise ListenerBindError(address, str(e)) from e

    return sock
