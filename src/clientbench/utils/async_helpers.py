"""
Async Utility Functions

Helpers for driving coroutines from the synchronous benchmark runner.
"""

import asyncio
from typing import Any, Awaitable

from clientbench.utils.logging import get_logger

logger = get_logger(__name__)


async def timeout_after(coro: Awaitable[Any], timeout: float,
                        timeout_message: str = "Operation timed out") -> Any:
    """
    Execute coroutine with timeout.

    The coroutine is cancelled when the deadline passes.

    Args:
        coro: Coroutine to execute
        timeout: Timeout in seconds
        timeout_message: Message to include in timeout exception

    Returns:
        Result of coroutine

    Raises:
        asyncio.TimeoutError: If operation times out
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Timeout after {timeout}s: {timeout_message}")
        raise asyncio.TimeoutError(timeout_message)


def close_event_loop(loop: asyncio.AbstractEventLoop) -> None:
    """Cancel leftover tasks and close the loop."""
    if loop.is_closed():
        return
    try:
        pending = [task for task in asyncio.all_tasks(loop) if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        loop.run_until_complete(loop.shutdown_asyncgens())
    finally:
        loop.close()
