"""
Runtime configuration for rbac-engine.

Settings are read from environment variables prefixed with ``RBAC_`` (and an
optional ``.env`` file) so each service instance can choose its cache,
repository and invalidation backends without code changes.
"""
import socket
import uuid
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BackendType, CacheTTL, InvalidationChannels


def _default_node_id() -> str:
    return f"{socket.gethostname()}-{uuid.uuid4().hex[:8]}"


class RBACSettings(BaseSettings):
    """Settings for the permission engine and its admin API."""

    model_config = SettingsConfigDict(
        env_prefix="RBAC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="rbac-engine")
    environment: str = Field(default="development")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    reload: bool = Field(default=False)

    # Permission cache
    cache_backend: BackendType = Field(default=BackendType.MEMORY)
    cache_ttl_seconds: int = Field(default=CacheTTL.PERMISSIONS_DEFAULT, gt=0)
    cache_max_entries: Optional[int] = Field(default=None, gt=0)

    # Repository
    repository_backend: BackendType = Field(default=BackendType.MEMORY)
    database_url: Optional[str] = Field(default=None)
    db_pool_min_size: int = Field(default=2, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)
    repository_timeout_seconds: float = Field(default=5.0, gt=0)

    # Redis (cache and invalidation bus)
    redis_url: Optional[str] = Field(default=None)

    # Invalidation bus
    invalidation_backend: BackendType = Field(default=BackendType.MEMORY)
    invalidation_channel: str = Field(default=InvalidationChannels.PERMISSIONS)
    node_id: str = Field(default_factory=_default_node_id)

    # Startup
    seed_on_startup: bool = Field(default=True)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="simple")

    @field_validator("cache_backend", "invalidation_backend")
    @classmethod
    def validate_shared_backend(cls, v: BackendType) -> BackendType:
        if v == BackendType.POSTGRES:
            raise ValueError("postgres is only a repository backend")
        return v

    @field_validator("repository_backend")
    @classmethod
    def validate_repository_backend(cls, v: BackendType) -> BackendType:
        if v == BackendType.REDIS:
            raise ValueError("redis is not a repository backend")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @property
    def uses_redis(self) -> bool:
        """Whether any component needs a Redis connection."""
        return BackendType.REDIS in (self.cache_backend, self.invalidation_backend)


@lru_cache()
def get_settings() -> RBACSettings:
    """Get cached settings instance."""
    return RBACSettings()
