"""In-process invalidation bus.

Several engine instances in one process can share a single bus to model a
multi-node deployment in tests.
"""

import asyncio
import logging
from typing import List, Optional

from ....core.exceptions import InvalidationError
from ..entities.event import InvalidationEvent
from ..entities.protocols import InvalidationHandler


logger = logging.getLogger(__name__)


class InMemoryInvalidationBus:
    """Queue-backed bus delivering every event to every subscribed handler."""

    def __init__(self):
        self._handlers: List[InvalidationHandler] = []
        self._queue: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None
        self._running = False
        self.published_count = 0

    @property
    def is_running(self) -> bool:
        return self._running

    def subscribe(self, handler: InvalidationHandler) -> None:
        self._handlers.append(handler)

    async def start(self) -> None:
        if self._running:
            return
        self._queue = asyncio.Queue()
        self._running = True
        self._task = asyncio.create_task(self._dispatch_loop())
        logger.debug("In-memory invalidation bus started")

    async def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.debug("In-memory invalidation bus stopped")

    async def publish(self, event: InvalidationEvent) -> None:
        if not self._running or self._queue is None:
            raise InvalidationError("Invalidation bus is not running")
        await self._queue.put(event)
        self.published_count += 1

    async def join(self) -> None:
        """Wait until every queued event has been delivered."""
        if self._queue is not None:
            await self._queue.join()

    async def _dispatch_loop(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                for handler in list(self._handlers):
                    try:
                        await handler(event)
                    except Exception as e:
                        logger.error(f"Invalidation handler failed for event {event.event_id}: {e}")
            finally:
                self._queue.task_done()
