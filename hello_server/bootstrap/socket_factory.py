"""Listening socket creation."""

import logging
import socket

from hello_server.bootstrap.config import ListenerConfig
from hello_server.domain.connection_id import ConnectionLoggerAdapter
from hello_server.domain.errors import BindError, ListenError, SocketError

SOCKET_LOGGER = ConnectionLoggerAdapter(logging.getLogger("hello_server.socket"), {})


def create_listening_socket(config: ListenerConfig) -> socket.socket:
    """Create an IPv4 stream socket bound to the configured address and listening.

    Raises SocketError, BindError or ListenError depending on which step fails.
    The socket is closed before any of them propagates.
    """
    try:
        server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as error:
        raise SocketError(f"Error creating socket: {error}", error) from error

    try:
        # SO_REUSEPORT stays off so a second instance cannot share the port.
        server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        server_socket.bind((config.host, config.port))
    except OSError as error:
        server_socket.close()
        raise BindError(
            f"Error binding socket to {config.host}:{config.port}: {error}", error
        ) from error

    try:
        server_socket.listen(config.backlog)
    except OSError as error:
        server_socket.close()
        raise ListenError(f"Error listening on socket: {error}", error) from error

    server_socket.settimeout(config.accept_poll_interval)
    SOCKET_LOGGER.debug(
        "Listening socket ready",
        extra={
            "event": "socket_ready",
            "host": config.host,
            "port": server_socket.getsockname()[1],
            "backlog": config.backlog,
        },
    )
    return server_socket
