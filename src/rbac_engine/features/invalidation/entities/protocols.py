"""Protocol interfaces for the invalidation bus."""

from abc import abstractmethod
from typing import Awaitable, Callable, Protocol, runtime_checkable

from .event import InvalidationEvent


InvalidationHandler = Callable[[InvalidationEvent], Awaitable[None]]


@runtime_checkable
class InvalidationBus(Protocol):
    """Best-effort fan-out of invalidation events to every instance.

    Delivery is not guaranteed; the cache TTL bounds staleness when an event
    is lost.
    """

    @abstractmethod
    async def publish(self, event: InvalidationEvent) -> None:
        """Send an event; raises InvalidationError on transport failure."""
        ...

    @abstractmethod
    def subscribe(self, handler: InvalidationHandler) -> None:
        """Register a coroutine called for every delivered event."""
        ...

    @abstractmethod
    async def start(self) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...
