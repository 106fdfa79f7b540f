"""
Integration tests against local range servers.

These use the default transport, so they cover connection handling and
the overall request timeout as well as the query semantics.
"""

import time
from http.server import BaseHTTPRequestHandler
from typing import Optional

import pytest

from range_client.client import RangeClient
from range_client.context import QueryContext
from range_client.exceptions import (
    CancellationError,
    RangeExceptionError,
    StatusError,
    TransportError,
)
from range_client.monitoring.stats import QueryStats


def respond(
    handler: BaseHTTPRequestHandler,
    status: int = 200,
    body: bytes = b"",
    headers: Optional[dict] = None,
) -> None:
    handler.send_response(status)
    for name, value in (headers or {}).items():
        handler.send_header(name, value)
    handler.send_header("Content-Length", str(len(body)))
    handler.end_headers()
    handler.wfile.write(body)


def answer(body: bytes):
    return lambda handler: respond(handler, body=body)


@pytest.mark.asyncio
async def test_query_resolves_over_http(range_server, test_settings):
    address, requests = range_server(answer(b"host1\nhost2\n"))

    async with RangeClient([address], settings=test_settings) as client:
        assert await client.query("%cluster-web") == ["host1", "host2"]

    assert requests == [("GET", "%cluster-web")]


@pytest.mark.asyncio
async def test_long_expression_sent_as_put(range_server, test_settings):
    address, requests = range_server(answer(b"ok"))
    expression = ",".join(f"host{i}.example.com" for i in range(400))

    async with RangeClient([address], settings=test_settings) as client:
        assert await client.query(expression) == ["ok"]

    assert requests == [("PUT", expression)]


@pytest.mark.asyncio
async def test_uri_too_long_falls_back_to_put(range_server, test_settings):
    def behaviour(handler):
        if handler.command == "GET":
            respond(handler, status=414)
        else:
            respond(handler, body=b"ok")

    address, requests = range_server(behaviour)

    async with RangeClient([address], settings=test_settings) as client:
        assert await client.query("%big") == ["ok"]

    assert [method for method, _ in requests] == ["GET", "PUT"]


@pytest.mark.asyncio
async def test_range_exception_header(range_server, test_settings):
    address, _ = range_server(
        lambda handler: respond(handler, body=b"trace", headers={"RangeException": "NO_SUCH_CLUSTER"})
    )

    async with RangeClient([address], settings=test_settings) as client:
        with pytest.raises(RangeExceptionError, match="NO_SUCH_CLUSTER"):
            await client.query("%nope")


@pytest.mark.asyncio
async def test_server_error_status(range_server, test_settings):
    address, _ = range_server(lambda handler: respond(handler, status=500, body=b"oops"))

    async with RangeClient([address], settings=test_settings) as client:
        with pytest.raises(StatusError) as exc_info:
            await client.query("%x")

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == b"oops"


@pytest.mark.asyncio
async def test_connection_refused_is_transport_error(unused_address, test_settings):
    async with RangeClient([unused_address], settings=test_settings) as client:
        with pytest.raises(TransportError):
            await client.query("%x")
        assert client.stats() == QueryStats(other_error=1)


@pytest.mark.asyncio
async def test_deadline_abandons_slow_server(range_server, test_settings):
    def slow(handler):
        time.sleep(0.5)
        respond(handler, body=b"late")

    address, _ = range_server(slow)

    async with RangeClient([address], settings=test_settings) as client:
        started = time.monotonic()
        with QueryContext(timeout=0.1) as ctx:
            with pytest.raises(CancellationError) as exc_info:
                await client.query_with_deadline(ctx, "%slow")

        assert time.monotonic() - started < 0.4
        assert exc_info.value.deadline_exceeded


@pytest.mark.asyncio
async def test_rotation_across_servers(range_server, test_settings):
    first, first_requests = range_server(answer(b"a"))
    second, second_requests = range_server(answer(b"b"))

    async with RangeClient([first, second], settings=test_settings) as client:
        results = [await client.query("%x") for _ in range(4)]

    assert results == [["a"], ["b"], ["a"], ["b"]]
    assert len(first_requests) == 2
    assert len(second_requests) == 2
