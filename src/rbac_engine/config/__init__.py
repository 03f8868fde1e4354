"""Configuration for rbac-engine: permission vocabulary, settings and logging."""

from .constants import (
    ALL_PERMISSION_CODES,
    DEFAULT_ROLE_PERMISSIONS,
    PERMISSION_CATEGORIES,
    PERMISSION_DESCRIPTIONS,
    PERMISSION_VOCABULARY_VERSION,
    PERMISSIONS,
    BackendType,
    CacheKeys,
    CacheTTL,
    InvalidationChannels,
    PermissionCategory,
    get_all_permissions,
    get_permission_category,
    is_valid_permission,
)
from .logging_config import LogFormat, LoggingConfig
from .settings import RBACSettings, get_settings

__all__ = [
    "ALL_PERMISSION_CODES",
    "DEFAULT_ROLE_PERMISSIONS",
    "PERMISSION_CATEGORIES",
    "PERMISSION_DESCRIPTIONS",
    "PERMISSION_VOCABULARY_VERSION",
    "PERMISSIONS",
    "BackendType",
    "CacheKeys",
    "CacheTTL",
    "InvalidationChannels",
    "PermissionCategory",
    "get_all_permissions",
    "get_permission_category",
    "is_valid_permission",
    "LogFormat",
    "LoggingConfig",
    "RBACSettings",
    "get_settings",
]
