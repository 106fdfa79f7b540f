"""
Mock range server for programs that test their range client handling.

MockConfig describes how a fake range server behaves; ``transport()`` turns
it into an ``httpx.MockTransport`` and ``new_mock_client`` wires that into a
RangeClient pointed at a dummy address.

    client = new_mock_client(MockConfig(results=["host1", "host2"]))
    assert await client.query("%anything") == ["host1", "host2"]
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from urllib.parse import unquote_plus

import httpx

from range_client.client import RangeClient
from range_client.config import RANGE_EXCEPTION_HEADER

MOCK_SERVER = "dummy.example.com"


def decode_expression(request: httpx.Request) -> str:
    """Recover the range expression from a GET query string or PUT form body."""
    if request.method == "PUT":
        body = request.content.decode("ascii")
        if body.startswith("query="):
            body = body[len("query="):]
        return unquote_plus(body)
    return unquote_plus(request.url.query.decode("ascii"))


@dataclass
class MockConfig:
    """
    Behaviour of a fake range server.

    Attributes:
        results: Lines returned for every query
        error: Transport error raised instead of answering (an httpx.HTTPError)
        range_exception: Value of a RangeException header to send
        callback: Called with the decoded expression; returns the lines to send
        status_code: Status to answer with (200 when unset)
        time_delay: Seconds to wait before answering
    """

    results: list[str] = field(default_factory=list)
    error: Optional[Exception] = None
    range_exception: str = ""
    callback: Optional[Callable[[str], list[str]]] = None
    status_code: int = 0
    time_delay: float = 0.0
    requests: list[httpx.Request] = field(default_factory=list, repr=False)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.time_delay > 0:
            await asyncio.sleep(self.time_delay)

        if self.error is not None:
            raise self.error

        results = self.results
        if self.callback is not None:
            results = self.callback(decode_expression(request))

        headers = {}
        if self.range_exception:
            headers[RANGE_EXCEPTION_HEADER] = self.range_exception
        return httpx.Response(
            self.status_code or httpx.codes.OK,
            headers=headers,
            content="\n".join(results).encode("utf-8"),
        )

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def new_mock_client(config: MockConfig, **kwargs: Any) -> RangeClient:
    """
    RangeClient that answers every query according to ``config``.

    Extra keyword arguments are passed to RangeClient (retry settings etc.).
    """
    transport = httpx.AsyncClient(transport=config.transport())
    return RangeClient([MOCK_SERVER], transport=transport, **kwargs)
