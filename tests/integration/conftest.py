"""Integration test fixtures (local range servers).

Starts real HTTP servers on 127.0.0.1 so queries go through the default
httpx transport, sockets included. Each server's behaviour is a plain
function receiving the request handler.
"""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable
from urllib.parse import unquote_plus

import pytest


class RangeRequestHandler(BaseHTTPRequestHandler):
    """Dispatches every request to the owning server's behaviour."""

    def do_GET(self):
        self.server.requests.append(("GET", self._expression()))
        self.server.behaviour(self)

    def do_PUT(self):
        self.server.requests.append(("PUT", self._expression()))
        self.server.behaviour(self)

    def _expression(self) -> str:
        if self.command == "PUT":
            length = int(self.headers.get("Content-Length", 0))
            body = self.rfile.read(length).decode("ascii")
            return unquote_plus(body.removeprefix("query="))
        _, _, query = self.path.partition("?")
        return unquote_plus(query)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def range_server():
    """Factory fixture starting a local range server.

    Usage:
        def test_something(range_server):
            address, requests = range_server(lambda h: respond(h, body=b"a\\n"))
    """
    started = []

    def _start(behaviour: Callable[[BaseHTTPRequestHandler], None]):
        httpd = ThreadingHTTPServer(("127.0.0.1", 0), RangeRequestHandler)
        httpd.daemon_threads = True
        httpd.behaviour = behaviour
        httpd.requests = []
        thread = threading.Thread(target=httpd.serve_forever, daemon=True)
        thread.start()
        started.append(httpd)
        host, port = httpd.server_address[:2]
        return f"{host}:{port}", httpd.requests

    yield _start

    for httpd in started:
        httpd.shutdown()
        httpd.server_close()


@pytest.fixture
def unused_address():
    """Address of a local port nothing is listening on."""
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), RangeRequestHandler)
    host, port = httpd.server_address[:2]
    httpd.server_close()
    return f"{host}:{port}"
