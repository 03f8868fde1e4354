"""Base exceptions for rbac-engine.

All engine exceptions inherit from RBACError and carry an error code and a
details mapping that the HTTP layer renders into the response body.
"""

from typing import Any, Dict, Optional


class RBACError(Exception):
    """Base exception for all rbac-engine errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception."""
    from .http_mapping import get_http_status_code as _mapped_status_code
    return _mapped_status_code(exception)


def create_error_response(exception: RBACError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The engine exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
