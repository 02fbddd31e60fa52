"""Unit tests for the entry point's startup and exit codes."""

import errno
import logging
import signal
from unittest.mock import patch

import pytest

import main
from hello_server.domain.errors import BindError, SocketError


@pytest.fixture(autouse=True)
def quiet_logging_setup():
    """Keep configure_logging from detaching the project logger from caplog."""
    with patch("main.configure_logging") as configure:
        yield configure


@pytest.fixture(autouse=True)
def restore_signal_handlers():
    previous = {
        sig: signal.getsignal(sig) for sig in (signal.SIGTERM, signal.SIGINT)
    }
    yield
    for sig, handler in previous.items():
        signal.signal(sig, handler)


@pytest.mark.parametrize(
    "error",
    [
        BindError("in use", OSError(errno.EADDRINUSE, "in use")),
        SocketError("no fds", OSError(errno.EMFILE, "no fds")),
    ],
)
def test_startup_failure_returns_1(error, caplog):
    caplog.set_level(logging.CRITICAL, logger="hello_server")
    with patch.object(main.Listener, "initialize", side_effect=error), patch.object(
        main.Listener, "run"
    ) as run:
        assert main.main(["--port", "8080"]) == 1

    run.assert_not_called()
    record = next(r for r in caplog.records if getattr(r, "event", None) == "startup_failed")
    assert record.error_type == type(error).__name__
    assert record.errno == error.errno


def test_invalid_configuration_returns_1():
    with patch.object(main.Listener, "initialize") as initialize:
        assert main.main(["--port", "70000"]) == 1
    initialize.assert_not_called()


def test_clean_run_returns_0_and_installs_signal_handlers(quiet_logging_setup):
    with patch.object(main.Listener, "initialize"), patch.object(
        main.Listener, "run"
    ) as run:
        assert main.main(["--log-level", "debug", "--log-format", "text"]) == 0

    run.assert_called_once()
    quiet_logging_setup.assert_called_once_with("DEBUG", "stdout", use_json=False)
    assert signal.getsignal(signal.SIGTERM) not in (signal.SIG_DFL, signal.SIG_IGN)
    assert signal.getsignal(signal.SIGINT) is signal.getsignal(signal.SIGTERM)


def test_signal_handler_stops_listener():
    with patch.object(main.Listener, "initialize"), patch.object(
        main.Listener, "run"
    ), patch.object(main.Listener, "stop") as stop:
        main.main([])
        handler = signal.getsignal(signal.SIGTERM)
        handler(signal.SIGTERM, None)
    stop.assert_called_once()
