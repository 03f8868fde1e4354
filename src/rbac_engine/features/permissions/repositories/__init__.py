"""Permission repository implementations."""

from .asyncpg_repository import AsyncPGPermissionRepository
from .memory_repository import InMemoryPermissionRepository

__all__ = [
    "AsyncPGPermissionRepository",
    "InMemoryPermissionRepository",
]
