"""TCP server answering every connection with a fixed HTTP-shaped response."""

import logging
import signal
import sys
from typing import Optional

from hello_server.bootstrap.config import ListenerConfig, parse_cli_args
from hello_server.bootstrap.logging_setup import configure_logging
from hello_server.domain.connection_id import ConnectionLoggerAdapter
from hello_server.domain.errors import StartupError
from hello_server.transport.listener import Listener

MAIN_LOGGER = ConnectionLoggerAdapter(logging.getLogger("hello_server.main"), {})


def main(argv: Optional[list[str]] = None) -> int:
    """Start the listener and accept connections until signalled."""
    args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    configure_logging(
        args.log_level, args.log_destination, use_json=args.log_format == "json"
    )

    try:
        config = ListenerConfig.from_args(args)
    except ValueError as error:
        MAIN_LOGGER.critical(
            "Invalid listener configuration",
            extra={"event": "startup_failed", "error": str(error)},
        )
        return 1

    listener = Listener(config)
    try:
        listener.initialize()
    except StartupError as error:
        MAIN_LOGGER.critical(
            str(error),
            extra={
                "event": "startup_failed",
                "error_type": type(error).__name__,
                "errno": error.errno,
                "host": config.host,
                "port": config.port,
            },
        )
        return 1

    def shutdown_handler(signum: int, _frame) -> None:
        MAIN_LOGGER.info(
            "Received shutdown signal",
            extra={"event": "signal_received", "signal": signum},
        )
        listener.stop()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    listener.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
