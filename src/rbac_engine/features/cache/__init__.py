"""Permission cache feature.

- entities/: CacheBackend protocol
- adapters/: memory and Redis backends
- services/: PermissionCache with TTL and fail-open reads
"""

from .adapters import MemoryCacheBackend, RedisCacheBackend
from .entities import CacheBackend
from .services import PermissionCache

__all__ = [
    "CacheBackend",
    "MemoryCacheBackend",
    "RedisCacheBackend",
    "PermissionCache",
]
