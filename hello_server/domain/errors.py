"""Error taxonomy for listener startup and per-connection handling."""

from typing import Optional


class ServerError(Exception):
    """Base class for all server errors."""

    def __init__(self, message: str, cause: Optional[OSError] = None) -> None:
        super().__init__(message)
        self.cause = cause

    @property
    def errno(self) -> Optional[int]:
        """Return the errno of the underlying OS error, if any."""
        if self.cause is None:
            return None
        return self.cause.errno


class StartupError(ServerError):
    """Raised when the listening endpoint cannot be brought up. Always fatal."""


class SocketError(StartupError):
    """Endpoint creation failed."""


class BindError(StartupError):
    """Address or port unavailable."""


class ListenError(StartupError):
    """Transition to the listening state failed."""


class AcceptError(ServerError):
    """A single accept attempt failed. The listener keeps running."""


class SpawnError(ServerError):
    """A handler thread could not be started for an accepted connection."""


class HandlerError(ServerError):
    """Failure contained within a single connection handler."""


class ReceiveError(HandlerError):
    """Reading from the client failed."""


class SendError(HandlerError):
    """Writing the response to the client failed."""
