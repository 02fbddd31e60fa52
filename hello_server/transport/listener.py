"""Listening endpoint and the connection acceptance loop."""

import logging
import socket
import threading
from typing import Optional

from hello_server.bootstrap.config import ListenerConfig
from hello_server.bootstrap.socket_factory import create_listening_socket
from hello_server.domain.connection_id import ConnectionLoggerAdapter
from hello_server.domain.errors import AcceptError, SpawnError
from hello_server.domain.response import FIXED_RESPONSE
from hello_server.lifecycle.state import ServerLifecycle
from hello_server.transport.connection import Connection
from hello_server.transport.context import HandlerContext
from hello_server.transport.handler import handle_connection

ACCEPT_LOGGER = ConnectionLoggerAdapter(
    logging.getLogger("hello_server.transport.listener"), {}
)


class Listener:
    """Owns the listening socket and hands each accepted connection to a thread."""

    def __init__(
        self,
        config: ListenerConfig,
        lifecycle: Optional[ServerLifecycle] = None,
        response: bytes = FIXED_RESPONSE,
    ) -> None:
        self.config = config
        self.lifecycle = lifecycle if lifecycle is not None else ServerLifecycle()
        self._context = HandlerContext(response=response, lifecycle=self.lifecycle)
        self._socket: Optional[socket.socket] = None

    @property
    def address(self) -> tuple[str, int]:
        """Return the bound (host, port), resolving port 0 to the real port."""
        if self._socket is None:
            raise RuntimeError("Listener is not initialized")
        host, port = self._socket.getsockname()[:2]
        return host, port

    def initialize(self) -> None:
        """Bind and listen. Raises a StartupError subclass on failure."""
        self._socket = create_listening_socket(self.config)
        host, port = self.address
        ACCEPT_LOGGER.info(
            "Server listening for connections",
            extra={
                "event": "server_listening",
                "host": host,
                "port": port,
                "backlog": self.config.backlog,
                "buffer_size": self.config.buffer_size,
            },
        )

    def run(self) -> None:
        """Accept connections until a stop is requested."""
        if self._socket is None:
            raise RuntimeError("Listener.run() called before initialize()")
        server_socket = self._socket

        try:
            while not self.lifecycle.should_stop():
                try:
                    client_socket, client_address = server_socket.accept()
                except socket.timeout:
                    continue
                except OSError as error:
                    if self.lifecycle.should_stop():
                        break
                    self._log_accept_error(AcceptError(str(error), error))
                    continue

                self._dispatch(client_socket, client_address)
        finally:
            self.close()

    def stop(self) -> None:
        """Make run() return after its current poll. Handlers are not awaited."""
        self.lifecycle.request_stop()

    def close(self) -> None:
        if self._socket is not None:
            self._socket.close()

    def _dispatch(
        self, client_socket: socket.socket, client_address: tuple[str, int]
    ) -> None:
        connection = Connection(
            client_socket, client_address[:2], self.config.buffer_size
        )
        if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
            ACCEPT_LOGGER.debug(
                "Client connection accepted",
                extra={
                    "event": "client_accepted",
                    "client": connection.peer,
                    "connection_id": connection.id,
                },
            )

        thread = threading.Thread(
            target=handle_connection,
            args=(connection, self._context),
            name=f"conn-{connection.id}",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError as error:
            spawn_error = SpawnError(f"Error starting handler thread: {error}")
            ACCEPT_LOGGER.error(
                str(spawn_error),
                extra={
                    "event": "spawn_error",
                    "client": connection.peer,
                    "connection_id": connection.id,
                    "error_type": type(error).__name__,
                },
            )
            connection.close()

    @staticmethod
    def _log_accept_error(error: AcceptError) -> None:
        ACCEPT_LOGGER.error(
            "Socket accept failed",
            extra={
                "event": "accept_error",
                "error_type": type(error.cause).__name__,
                "errno": error.errno,
                "error": str(error),
            },
        )
