"""
HTTP Server - Liveness Endpoint and Port-Retry Binding

The process exposes a single GET / that answers with the port it is
bound to. The listening socket is bound here, trying base_port,
base_port + 1, ... while the address is in use, and then handed to
uvicorn so the served port is exactly the one that was bound.

Files that USE this module:
- tasabot.app (binds the listener and runs the server)
- tests.test_http_server (unit tests)

Files that this module USES:
- tasabot.domain.errors (PortRetryExhausted)
"""
from __future__ import annotations

import asyncio
import contextlib
import errno
import logging
import socket
from typing import Callable, Iterator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from tasabot.domain.errors import PortRetryExhausted

logger = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 0.2
BACKLOG = 128


def create_http_app(port_source: Callable[[], Optional[int]]) -> FastAPI:
    """
    Build the liveness app.

    Args:
        port_source: Returns the bound port, or None before binding
    """
    app = FastAPI(title="tasabot", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/", response_class=PlainTextResponse)
    def liveness() -> str:
        port = port_source()
        return f"API Telegram Server is running on port {port if port is not None else 'unknown'}"

    return app


def _open_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(BACKLOG)
    except OSError:
        sock.close()
        raise
    sock.setblocking(False)
    return sock


async def bind_listener(
    host: str,
    base_port: int,
    max_attempts: int = 10,
    retry_delay: float = RETRY_DELAY_SECONDS,
) -> socket.socket:
    """
    Bind a listening TCP socket, moving to the next port while in use.

    Args:
        host: Interface to bind
        base_port: First port to try
        max_attempts: Number of consecutive ports to try
        retry_delay: Pause between attempts in seconds

    Returns:
        Listening, non-blocking socket

    Raises:
        PortRetryExhausted: If every port in the range is in use
        OSError: For any bind error other than address-in-use
    """
    port = base_port
    for attempt in range(max_attempts):
        port = base_port + attempt
        try:
            sock = _open_socket(host, port)
        except OSError as e:
            if e.errno != errno.EADDRINUSE:
                raise
            if attempt + 1 < max_attempts:
                logger.warning("Port %d is already in use. Trying port %d...", port, port + 1)
                await asyncio.sleep(retry_delay)
            continue
        logger.info("Listener bound on %s:%d", host, port)
        return sock
    raise PortRetryExhausted(base_port, port)


class ListenerServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the application."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield

    def install_signal_handlers(self) -> None:
        pass


def build_http_server(app: FastAPI, grace_seconds: float = 5.0) -> ListenerServer:
    """Wrap the app in a uvicorn server that keeps the process's logging setup."""
    config = uvicorn.Config(
        app,
        log_config=None,
        access_log=False,
        lifespan="off",
        timeout_graceful_shutdown=int(grace_seconds) or 1,
    )
    return ListenerServer(config)
