"""
HTTP Server Tests - Liveness Endpoint and Port-Retry Binding

Files that this module USES:
- tasabot.adapters.http.server (create_http_app, bind_listener, build_http_server)
- fastapi.testclient (TestClient for the liveness app)
- httpx (real HTTP request against a served socket)
"""
import asyncio  # Drive coroutines from sync tests
import errno  # Error numbers for bind failures
import socket  # Occupy ports for retry tests

import httpx  # HTTP client for the end-to-end check
import pytest  # Testing framework for writing and running tests

from unittest.mock import patch  # Patch the socket opener
from fastapi.testclient import TestClient  # In-process client for FastAPI

from tasabot.adapters.http.server import bind_listener, build_http_server, create_http_app
from tasabot.domain.errors import PortRetryExhausted

HOST = "127.0.0.1"


def _occupy_port():
    """Return a listening socket on a free port and that port."""
    blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    blocker.bind((HOST, 0))
    blocker.listen(1)
    return blocker, blocker.getsockname()[1]


class TestLivenessEndpoint:
    def test_reports_bound_port(self):
        client = TestClient(create_http_app(lambda: 10001))
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.text == "API Telegram Server is running on port 10001"
        assert resp.headers["content-type"].startswith("text/plain")

    def test_unknown_before_binding(self):
        client = TestClient(create_http_app(lambda: None))
        assert client.get("/").text == "API Telegram Server is running on port unknown"


class TestBindListener:
    def test_binds_base_port_when_free(self):
        blocker, port = _occupy_port()
        blocker.close()
        sock = asyncio.run(bind_listener(HOST, port, max_attempts=1, retry_delay=0))
        try:
            assert sock.getsockname()[1] == port
        finally:
            sock.close()

    def test_moves_to_next_port_when_in_use(self):
        blocker, port = _occupy_port()
        try:
            sock = asyncio.run(bind_listener(HOST, port, max_attempts=10, retry_delay=0))
            try:
                assert port < sock.getsockname()[1] < port + 10
            finally:
                sock.close()
        finally:
            blocker.close()

    def test_exhausted_retry_budget(self):
        blocker, port = _occupy_port()
        try:
            with pytest.raises(PortRetryExhausted) as excinfo:
                asyncio.run(bind_listener(HOST, port, max_attempts=1, retry_delay=0))
            assert excinfo.value.first_port == port
            assert excinfo.value.last_port == port
        finally:
            blocker.close()

    def test_other_bind_errors_are_fatal(self):
        denied = OSError(errno.EACCES, "Permission denied")
        with patch('tasabot.adapters.http.server._open_socket', side_effect=denied) as opener:
            with pytest.raises(OSError) as excinfo:
                asyncio.run(bind_listener(HOST, 80, max_attempts=5, retry_delay=0))
        assert excinfo.value.errno == errno.EACCES
        opener.assert_called_once()

    def test_retries_each_port_once(self):
        in_use = OSError(errno.EADDRINUSE, "Address already in use")
        with patch('tasabot.adapters.http.server._open_socket', side_effect=in_use) as opener:
            with pytest.raises(PortRetryExhausted):
                asyncio.run(bind_listener(HOST, 10000, max_attempts=3, retry_delay=0))
        ports = [call.args[1] for call in opener.call_args_list]
        assert ports == [10000, 10001, 10002]


class TestServedListener:
    def test_serves_liveness_on_retried_port(self):
        async def scenario(base_port):
            sock = await bind_listener(HOST, base_port, max_attempts=10, retry_delay=0)
            bound = sock.getsockname()[1]
            server = build_http_server(create_http_app(lambda: bound), grace_seconds=1)
            task = asyncio.create_task(server.serve(sockets=[sock]))
            for _ in range(200):
                if server.started:
                    break
                await asyncio.sleep(0.02)
            async with httpx.AsyncClient(trust_env=False) as client:
                resp = await client.get(f"http://{HOST}:{bound}/")
            server.should_exit = True
            await asyncio.wait_for(task, timeout=5)
            return bound, resp

        blocker, port = _occupy_port()
        try:
            bound, resp = asyncio.run(scenario(port))
        finally:
            blocker.close()

        assert bound != port
        assert resp.status_code == 200
        assert resp.text == f"API Telegram Server is running on port {bound}"
