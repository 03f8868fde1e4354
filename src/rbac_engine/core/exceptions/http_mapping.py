"""HTTP status code mapping for exceptions."""

from typing import Dict, Optional, Type

from .base import RBACError
from .domain import (
    AuthenticationRequiredError,
    CacheError,
    ConflictError,
    InvalidationError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    StorageUnavailableError,
    ValidationError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,

    # 401 Unauthorized
    AuthenticationRequiredError: 401,

    # 403 Forbidden
    PermissionDeniedError: 403,

    # 404 Not Found
    NotFoundError: 404,

    # 409 Conflict
    ConflictError: 409,

    # 500 Internal Server Error
    StorageError: 500,
    CacheError: 500,
    InvalidationError: 500,

    # 503 Service Unavailable
    StorageUnavailableError: 503,

    # Default for RBACError
    RBACError: 500,
}


class HttpStatusMapper:
    """Maps exceptions to HTTP status codes.

    Lookup walks the exception's MRO so subclasses such as RoleNotFoundError
    inherit their parent's status. Explicit overrides take precedence.
    """

    def __init__(self, overrides: Optional[Dict[Type[Exception], int]] = None):
        self._overrides = dict(overrides or {})
        self._cache: Dict[Type[Exception], int] = {}

    def get_status_code(self, exception: Exception) -> int:
        exception_type = type(exception)
        if exception_type in self._cache:
            return self._cache[exception_type]

        status_code = 500
        for klass in exception_type.__mro__:
            if klass in self._overrides:
                status_code = self._overrides[klass]
                break
            if klass in HTTP_STATUS_MAP:
                status_code = HTTP_STATUS_MAP[klass]
                break

        self._cache[exception_type] = status_code
        return status_code

    def clear_cache(self) -> None:
        self._cache.clear()


_default_mapper = HttpStatusMapper()


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code using the default mapper."""
    return _default_mapper.get_status_code(exception)
