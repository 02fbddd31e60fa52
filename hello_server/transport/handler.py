"""Handler thread logic for servicing a single accepted connection."""

import logging
import threading

from hello_server.domain.connection_id import (
    ConnectionLoggerAdapter,
    clear_connection_id,
    set_connection_id,
)
from hello_server.domain.errors import HandlerError, ReceiveError
from hello_server.transport.connection import Connection
from hello_server.transport.context import HandlerContext

HANDLER_LOGGER = ConnectionLoggerAdapter(
    logging.getLogger("hello_server.transport.handler"), {}
)


def _log_handler_error(connection: Connection, error: HandlerError) -> None:
    event = "receive_error" if isinstance(error, ReceiveError) else "send_error"
    HANDLER_LOGGER.error(
        str(error),
        extra={
            "event": event,
            "client": connection.peer,
            "error_type": type(error.cause).__name__,
            "errno": error.errno,
        },
    )


def handle_connection(connection: Connection, context: HandlerContext) -> None:
    """Read once, write the fixed response, and close the connection.

    Errors never escape: the connection is closed on every path and the
    thread is dropped from the lifecycle registry.
    """
    current_thread = threading.current_thread()
    context.lifecycle.register_handler(current_thread)
    set_connection_id(connection.id)

    try:
        request = connection.receive()
        if HANDLER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            HANDLER_LOGGER.debug(
                "Request received",
                extra={
                    "event": "request_received",
                    "client": connection.peer,
                    "bytes_in": len(request),
                },
            )

        connection.send(context.response)
        HANDLER_LOGGER.debug(
            "Response sent",
            extra={
                "event": "response_sent",
                "client": connection.peer,
                "bytes_out": len(context.response),
            },
        )
    except HandlerError as error:
        _log_handler_error(connection, error)
    except Exception as error:  # pylint: disable=broad-except
        HANDLER_LOGGER.error(
            "Unexpected error in handler",
            extra={
                "event": "handler_error",
                "client": connection.peer,
                "error_type": type(error).__name__,
                "error": str(error),
            },
            exc_info=True,
        )
    finally:
        last_state = connection.state.value
        try:
            connection.close()
        finally:
            context.lifecycle.cleanup_handler(current_thread)
            HANDLER_LOGGER.debug(
                "Connection closed",
                extra={
                    "event": "connection_closed",
                    "client": connection.peer,
                    "state": last_state,
                },
            )
            clear_connection_id()
