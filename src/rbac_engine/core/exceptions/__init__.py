"""Exception hierarchy for rbac-engine."""

from .base import RBACError, create_error_response, get_http_status_code
from .domain import (
    AuthenticationRequiredError,
    CacheError,
    ConflictError,
    InvalidationError,
    InvalidPermissionCodeError,
    NotFoundError,
    PermissionDeniedError,
    PermissionNotFoundError,
    RoleInUseError,
    RoleNotFoundError,
    StorageError,
    StorageUnavailableError,
    TeamNotFoundError,
    ValidationError,
)
from .http_mapping import HTTP_STATUS_MAP, HttpStatusMapper

__all__ = [
    "RBACError",
    "create_error_response",
    "get_http_status_code",
    "AuthenticationRequiredError",
    "CacheError",
    "ConflictError",
    "InvalidationError",
    "InvalidPermissionCodeError",
    "NotFoundError",
    "PermissionDeniedError",
    "PermissionNotFoundError",
    "RoleInUseError",
    "RoleNotFoundError",
    "StorageError",
    "StorageUnavailableError",
    "TeamNotFoundError",
    "ValidationError",
    "HTTP_STATUS_MAP",
    "HttpStatusMapper",
]
