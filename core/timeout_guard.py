# core/timeout_guard.py
import asyncio
import logging
from typing import Awaitable, TypeVar
from util.errors import StageTimeoutError

T = TypeVar("T")
logger = logging.getLogger(__name__)


def _drain_abandoned(task: "asyncio.Future[object]") -> None:
    # Late results of an abandoned call are read and dropped.
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("timeout.abandoned.error err=%s", type(exc).__name__)
    else:
        logger.debug("timeout.abandoned.settled")


async def with_timeout(operation: Awaitable[T], timeout_ms: int, *, stage: str) -> T:
    """
    Race `operation` against a deadline of `timeout_ms` milliseconds.

    - Settles first: its result or exception propagates unchanged.
    - Deadline first: raises StageTimeoutError. The operation is abandoned, not
      cancelled; it may still finish in the background and its outcome is ignored.
    - If the caller itself is cancelled, the operation is cancelled with it.
    """
    task = asyncio.ensure_future(operation)
    try:
        done, _ = await asyncio.wait({task}, timeout=max(0, timeout_ms) / 1000)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if task in done:
        return task.result()

    task.add_done_callback(_drain_abandoned)
    logger.warning("timeout.fired stage=%s ms=%d", stage, timeout_ms)
    raise StageTimeoutError(stage, timeout_ms)
