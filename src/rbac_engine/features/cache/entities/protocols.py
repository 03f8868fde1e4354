"""Protocol interfaces for permission cache backends."""

from abc import abstractmethod
from typing import Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Key/value store holding serialized permission sets with a TTL.

    Backends raise CacheError on failure; the permission cache decides how
    to degrade.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """Return the stored value, or None when missing or expired."""
        ...

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        ...

    @abstractmethod
    async def delete_many(self, keys: Iterable[str]) -> int:
        ...

    @abstractmethod
    async def clear(self) -> None:
        ...
