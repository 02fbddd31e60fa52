"""Accepted client connection and its per-connection state machine."""

import socket
import threading
from dataclasses import dataclass, field
from enum import Enum

from hello_server.domain.connection_id import generate_connection_id
from hello_server.domain.errors import ReceiveError, SendError


class ConnectionState(Enum):
    """Connection lifecycle states."""

    ACCEPTED = "accepted"
    READING = "reading"
    RESPONDING = "responding"
    CLOSED = "closed"


_TRANSITIONS = {
    ConnectionState.ACCEPTED: {ConnectionState.READING, ConnectionState.CLOSED},
    ConnectionState.READING: {ConnectionState.RESPONDING, ConnectionState.CLOSED},
    ConnectionState.RESPONDING: {ConnectionState.CLOSED},
    ConnectionState.CLOSED: set(),
}


@dataclass
class Connection:
    """One accepted client socket, owned by exactly one handler.

    ``close`` may be called any number of times; the socket is closed once.
    """

    socket: socket.socket
    address: tuple[str, int]
    buffer_size: int
    id: str = field(default_factory=generate_connection_id)
    state: ConnectionState = ConnectionState.ACCEPTED
    _close_lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    @property
    def peer(self) -> str:
        return f"{self.address[0]}:{self.address[1]}"

    @property
    def closed(self) -> bool:
        return self.state is ConnectionState.CLOSED

    def _advance(self, new_state: ConnectionState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Illegal connection transition {self.state.value} -> {new_state.value}"
            )
        self.state = new_state

    def receive(self) -> bytes:
        """Perform the single read; empty bytes means the peer sent nothing."""
        self._advance(ConnectionState.READING)
        try:
            # Accepted sockets may inherit the listener's poll timeout.
            self.socket.settimeout(None)
            return self.socket.recv(self.buffer_size)
        except OSError as error:
            raise ReceiveError(f"Error receiving data: {error}", error) from error

    def send(self, payload: bytes) -> None:
        """Write the whole payload to the peer."""
        self._advance(ConnectionState.RESPONDING)
        try:
            self.socket.sendall(payload)
        except OSError as error:
            raise SendError(f"Error sending data: {error}", error) from error

    def close(self) -> bool:
        """Close the socket. Returns False when it was already closed."""
        with self._close_lock:
            if self.closed:
                return False
            self._advance(ConnectionState.CLOSED)
        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass
        self.socket.close()
        return True
