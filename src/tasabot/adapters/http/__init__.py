"""
HTTP Adapters - Liveness Endpoint

This package contains the FastAPI liveness app and the port-retrying
listener used to serve it with uvicorn.
"""

from tasabot.adapters.http.server import (
    ListenerServer,
    bind_listener,
    build_http_server,
    create_http_app,
)

__all__ = [
    "ListenerServer",
    "bind_listener",
    "build_http_server",
    "create_http_app",
]
