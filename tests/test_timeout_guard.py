from __future__ import annotations

import asyncio

import pytest

from core.timeout_guard import with_timeout
from util.errors import StageTimeoutError


async def test_result_propagates_when_operation_settles_first():
    async def op():
        await asyncio.sleep(0)
        return 42

    assert await with_timeout(op(), 1000, stage="parse") == 42


async def test_failure_propagates_unchanged():
    async def op():
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        await with_timeout(op(), 1000, stage="parse")


async def test_deadline_raises_typed_timeout():
    async def op():
        await asyncio.sleep(1)

    with pytest.raises(StageTimeoutError) as info:
        await with_timeout(op(), 10, stage="generate")

    assert info.value.stage == "generate"
    assert info.value.timeout_ms == 10
    assert isinstance(info.value, TimeoutError)


async def test_abandoned_operation_is_not_cancelled():
    finished = asyncio.Event()

    async def op():
        await asyncio.sleep(0.05)
        finished.set()
        return "late"

    with pytest.raises(StageTimeoutError):
        await with_timeout(op(), 5, stage="search")

    await asyncio.wait_for(finished.wait(), timeout=1)
    assert finished.is_set()


async def test_abandoned_failure_is_swallowed_quietly():
    async def op():
        await asyncio.sleep(0.02)
        raise RuntimeError("late failure")

    with pytest.raises(StageTimeoutError):
        await with_timeout(op(), 5, stage="generate")

    # Let the abandoned call fail; its exception is read by the drain callback.
    await asyncio.sleep(0.05)
