"""Context object handed to every handler thread."""

from dataclasses import dataclass

from hello_server.lifecycle.state import ServerLifecycle


@dataclass(frozen=True)
class HandlerContext:
    """Read-only dependencies shared across handler threads."""

    response: bytes
    lifecycle: ServerLifecycle
