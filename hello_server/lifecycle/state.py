"""Server lifecycle state management."""

import logging
import threading

from hello_server.domain.connection_id import ConnectionLoggerAdapter

LIFECYCLE_LOGGER = ConnectionLoggerAdapter(
    logging.getLogger("hello_server.lifecycle"), {}
)


class ServerLifecycle:
    """Tracks the stop flag and the handler threads currently alive."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._handlers: set[threading.Thread] = set()

    def should_stop(self) -> bool:
        """Check if the accept loop should return."""
        return self._stop_event.is_set()

    def request_stop(self) -> None:
        """Ask the accept loop to return. In-flight handlers are not awaited."""
        self._stop_event.set()
        LIFECYCLE_LOGGER.info(
            "Stop requested",
            extra={
                "event": "shutdown_requested",
                "active_handlers": self.active_handler_count(),
            },
        )

    def register_handler(self, thread: threading.Thread) -> None:
        """Register a handler thread for tracking."""
        with self._lock:
            self._handlers.add(thread)

    def cleanup_handler(self, thread: threading.Thread) -> None:
        """Remove a handler thread from tracking."""
        with self._lock:
            self._handlers.discard(thread)

    def has_handler(self, thread: threading.Thread) -> bool:
        """Return True when the handler is currently tracked."""
        with self._lock:
            return thread in self._handlers

    def active_handler_count(self) -> int:
        """Return the number of tracked handler threads still alive."""
        with self._lock:
            self._handlers = {h for h in self._handlers if h.is_alive()}
            return len(self._handlers)
