"""Cancellation helpers built on a shared :class:`asyncio.Event` signal."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterable, AsyncIterator, Awaitable, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _discard(task: "asyncio.Future[object]") -> None:
    task.cancel()
    try:
        await task
    except (asyncio.CancelledError, StopAsyncIteration):
        pass
    except Exception as e:
        logger.debug("Cancelled task finished with %s: %s", type(e).__name__, e)


async def run_until_cancelled(
    awaitable: Awaitable[T], signal: Optional[asyncio.Event]
) -> Tuple[bool, Optional[T]]:
    """Await *awaitable* unless *signal* is set first.

    Returns ``(True, result)`` when it completed and ``(False, None)`` when
    the signal won; in that case the pending work is cancelled.
    """
    if signal is None:
        return True, await awaitable
    if signal.is_set():
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        return False, None

    work = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(signal.wait())
    try:
        await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
    if work.done():
        return True, work.result()
    await _discard(work)
    return False, None


async def iterate_until_cancelled(
    source: AsyncIterable[T], signal: Optional[asyncio.Event]
) -> AsyncIterator[T]:
    """Yield from *source* until it ends or *signal* is set.

    A pending ``__anext__`` is raced against the signal, so a stalled
    upstream cannot keep a cancelled consumer waiting.  Items that arrive
    together with the signal are dropped.
    """
    iterator = source.__aiter__()
    try:
        while signal is None or not signal.is_set():
            try:
                completed, item = await run_until_cancelled(iterator.__anext__(), signal)
            except StopAsyncIteration:
                return
            if not completed or (signal is not None and signal.is_set()):
                logger.debug("Stream iteration stopped by cancellation signal.")
                return
            yield item  # type: ignore[misc]
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()
