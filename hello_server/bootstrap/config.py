"""Listener configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_BACKLOG = 500
DEFAULT_BUFFER_SIZE = 4096
ACCEPT_POLL_INTERVAL = 0.5

LOG_LEVEL_ENV = "HELLO_SERVER_LOG_LEVEL"
LOG_DESTINATION_ENV = "HELLO_SERVER_LOG_DESTINATION"
LOG_FORMAT_ENV = "HELLO_SERVER_LOG_FORMAT"


@dataclass(frozen=True)
class ListenerConfig:
    """Immutable listener settings built once at startup."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    backlog: int = DEFAULT_BACKLOG
    buffer_size: int = DEFAULT_BUFFER_SIZE
    accept_poll_interval: float = ACCEPT_POLL_INTERVAL

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Port out of range: {self.port}")
        if self.backlog <= 0:
            raise ValueError(f"Backlog must be positive: {self.backlog}")
        if self.buffer_size <= 0:
            raise ValueError(f"Buffer size must be positive: {self.buffer_size}")
        if self.accept_poll_interval <= 0:
            raise ValueError("Accept poll interval must be positive")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ListenerConfig":
        """Build a config from parsed CLI arguments."""
        return cls(
            host=args.host,
            port=args.port,
            backlog=args.backlog,
            buffer_size=args.buffer_size,
        )


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for server configuration."""
    parser = argparse.ArgumentParser(
        description="TCP server answering every connection with a fixed response"
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument(
        "--backlog",
        type=int,
        default=DEFAULT_BACKLOG,
        help="Maximum number of pending connections queued by the OS",
    )
    parser.add_argument(
        "--buffer-size",
        type=int,
        default=DEFAULT_BUFFER_SIZE,
        help="Maximum bytes read from each client",
    )
    default_log_level = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    default_destination = os.getenv(LOG_DESTINATION_ENV, "stdout")
    default_log_format = os.getenv(LOG_FORMAT_ENV, "json").lower()
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout or a file path",
    )
    parser.add_argument(
        "--log-format",
        default=default_log_format,
        choices=["json", "text"],
        type=str.lower,
    )
    return parser.parse_args(argv)
