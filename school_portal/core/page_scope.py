"""Lifetime-bound fetch scope for a single page."""
import asyncio
from typing import Any, Awaitable, Dict, List, Set, TypeVar

from school_portal.core.exceptions import PageClosedError
from school_portal.core.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class PageScope:
    """
    Owns the fetches issued while a page is open.

    Fetches started with ``run``/``gather`` are tasks of this scope. Leaving
    the scope cancels whatever is still in flight, and from then on
    ``set_state`` refuses writes so a late response can never land on a page
    that is gone. Each scope holds its own ``state``; nothing is shared.
    """

    def __init__(self, name: str = "page"):
        self.name = name
        self.state: Dict[str, Any] = {}
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "PageScope":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def spawn(self, coro: Awaitable[T]) -> "asyncio.Task[T]":
        """Start a fetch owned by this scope without waiting for it."""
        if self._closed:
            # Avoid "coroutine was never awaited" warnings
            if asyncio.iscoroutine(coro):
                coro.close()
            raise PageClosedError(f"Page '{self.name}' is closed", error_code="PAGE_CLOSED")
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self, coro: Awaitable[T]) -> T:
        """Run one fetch inside the scope and return its result."""
        return await self.spawn(coro)

    async def gather(self, *coros: Awaitable[Any]) -> List[Any]:
        """Run fetches concurrently; results come back in argument order."""
        tasks = [self.spawn(coro) for coro in coros]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

    def set_state(self, key: str, value: Any) -> bool:
        """Store a page-local value. Returns False once the page has closed."""
        if self._closed:
            logger.debug(f"Dropped late state update '{key}' for closed page '{self.name}'")
            return False
        self.state[key] = value
        return True

    async def close(self) -> None:
        """Cancel in-flight fetches and stop accepting state."""
        if self._closed:
            return
        self._closed = True
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.debug(f"Cancelled {len(pending)} pending request(s) for page '{self.name}'")
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
