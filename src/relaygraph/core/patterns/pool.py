"""Bounded pool for running agent calls concurrently.

The parallel pattern submits one task per agent. The pool limits how many
run at the same time, keeps track of the tasks it started and, on shutdown,
cancels whatever is still running and refuses new work.

Example:
    ```python
    async with AgentPool(max_workers=4) as pool:
        task = pool.submit(agent.invoke, "Summarise this")
        text = await task
    ```
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Set, TypeVar

from relaygraph.core.config import get_settings
from relaygraph.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.PATTERNS)

T = TypeVar("T")


class AgentPool:
    """Semaphore-bounded set of asyncio tasks with explicit shutdown.

    Args:
        max_workers: Tasks allowed to run at once, defaults to
            ``RELAYGRAPH_MAX_WORKERS``
    """

    def __init__(self, max_workers: Optional[int] = None):
        self.max_workers = max_workers if max_workers is not None else get_settings().max_workers
        if self.max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self._semaphore = asyncio.Semaphore(self.max_workers)
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active(self) -> int:
        """Tasks submitted and not yet finished."""
        return len(self._tasks)

    def submit(self, fn: Callable[..., Awaitable[T]], *args: Any, name: Optional[str] = None) -> "asyncio.Task[T]":
        """Schedule ``fn(*args)`` once a worker slot is free.

        Raises:
            RuntimeError: If the pool has been shut down
        """
        if self._closed:
            raise RuntimeError("AgentPool is shut down")
        task = asyncio.create_task(self._run(fn, *args), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, fn: Callable[..., Awaitable[T]], *args: Any) -> T:
        async with self._semaphore:
            return await fn(*args)

    async def shutdown(self, cancel: bool = True) -> None:
        """Stop accepting work and wait for outstanding tasks.

        Args:
            cancel: Cancel running tasks instead of letting them finish
        """
        self._closed = True
        tasks = list(self._tasks)
        if not tasks:
            return
        if cancel:
            logger.debug(f"Cancelling {len(tasks)} outstanding agent tasks")
            for task in tasks:
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def __aenter__(self) -> "AgentPool":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()
