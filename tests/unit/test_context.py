"""Unit tests for QueryContext."""

import asyncio

import pytest

from range_client.context import DEADLINE_EXCEEDED, QueryContext
from range_client.exceptions import CancellationError


@pytest.mark.asyncio
async def test_background_context_never_cancelled():
    ctx = QueryContext.background()
    assert not ctx.cancelled
    assert await ctx.sleep(0.01) is False


@pytest.mark.asyncio
async def test_explicit_cancel_keeps_first_reason():
    ctx = QueryContext()
    ctx.cancel("first")
    ctx.cancel("second")

    assert ctx.cancelled
    assert ctx.reason == "first"
    error = ctx.error()
    assert isinstance(error, CancellationError)
    assert str(error) == "first"


@pytest.mark.asyncio
async def test_deadline_cancels_context():
    ctx = QueryContext.with_timeout(0.02)
    await asyncio.wait_for(ctx.wait(), timeout=1.0)

    assert ctx.reason == DEADLINE_EXCEEDED
    assert ctx.error().deadline_exceeded


@pytest.mark.asyncio
async def test_non_positive_timeout_is_already_expired():
    ctx = QueryContext(timeout=0)
    assert ctx.cancelled
    assert ctx.error().deadline_exceeded


@pytest.mark.asyncio
async def test_sleep_interrupted_by_cancel():
    ctx = QueryContext()
    asyncio.get_running_loop().call_later(0.02, ctx.cancel)

    loop = asyncio.get_running_loop()
    start = loop.time()
    assert await ctx.sleep(5.0) is True
    assert loop.time() - start < 1.0


@pytest.mark.asyncio
async def test_exiting_block_disarms_deadline():
    with QueryContext(timeout=0.02) as ctx:
        pass
    await asyncio.sleep(0.05)
    assert not ctx.cancelled
