"""Shared pytest fixtures for integration and unit tests."""

from __future__ import annotations

import logging
import subprocess
import threading
from pathlib import Path
from typing import Generator, TypedDict

import pytest

from hello_server.bootstrap.config import ListenerConfig
from hello_server.transport.listener import Listener
from tests.utils.process import launch_server, stop_process
from tests.utils.tcp import reserve_port, wait_for_port


class ServerProcessInfo(TypedDict):
    """Metadata describing a running server fixture instance."""

    host: str
    port: int
    process: subprocess.Popen[str]
    log_file: Path


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Ensure logs propagate to root so caplog can catch them."""
    logger = logging.getLogger("hello_server")
    old_propagate = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = old_propagate


@pytest.fixture(name="server_process")
def _server_process(tmp_path: Path) -> Generator[ServerProcessInfo, None, None]:
    """Launch the server in a background process for process-level tests."""

    host = "127.0.0.1"
    port = reserve_port(host)
    log_file = tmp_path / "server.log"
    process = launch_server(host, port, log_file)
    try:
        wait_for_port(host, port)
    except Exception:
        stop_process(process)
        raise
    yield {"host": host, "port": port, "process": process, "log_file": log_file}
    stop_process(process)


@pytest.fixture(name="running_listener")
def _running_listener() -> Generator[Listener, None, None]:
    """Run a Listener on an ephemeral loopback port in a background thread."""

    config = ListenerConfig(host="127.0.0.1", port=0, accept_poll_interval=0.05)
    listener = Listener(config)
    listener.initialize()
    thread = threading.Thread(target=listener.run, daemon=True)
    thread.start()
    yield listener
    listener.stop()
    thread.join(timeout=5)
