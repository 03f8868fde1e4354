"""Domain exceptions raised by the permission engine."""

from typing import List, Optional, Sequence

from .base import RBACError


# Validation
class ValidationError(RBACError):
    """Raised when input fails validation."""
    pass


class InvalidPermissionCodeError(ValidationError):
    """Raised when one or more permission codes are not in the vocabulary."""

    def __init__(self, invalid_codes: Sequence[str], message: Optional[str] = None):
        codes: List[str] = sorted(set(invalid_codes))
        super().__init__(
            message or f"Invalid permission codes: {', '.join(codes)}",
            details={"invalid_codes": codes},
        )
        self.invalid_codes = codes


# Not found
class NotFoundError(RBACError):
    """Raised when a requested entity does not exist."""
    pass


class RoleNotFoundError(NotFoundError):
    """Raised when a role is not found."""
    pass


class TeamNotFoundError(NotFoundError):
    """Raised when a team is not found."""
    pass


class PermissionNotFoundError(NotFoundError):
    """Raised when a permission code has no stored row."""
    pass


# Conflict
class ConflictError(RBACError):
    """Raised when an operation conflicts with existing state."""
    pass


class RoleInUseError(ConflictError):
    """Raised when deleting a role that is still assigned to users."""

    def __init__(self, role_id: str, user_ids: Sequence[str]):
        ids = sorted(user_ids)
        super().__init__(
            f"Role {role_id} is assigned to {len(ids)} user(s); "
            "supply a replacement role to delete it",
            details={"affected_users": len(ids), "user_ids": ids},
        )
        self.role_id = role_id
        self.user_ids = ids


# Request authorization
class AuthenticationRequiredError(RBACError):
    """Raised when a request carries no authenticated identity."""
    pass


class PermissionDeniedError(RBACError):
    """Raised when the identity lacks the required permissions."""

    def __init__(self, required: Sequence[str], message: Optional[str] = None):
        required_list = list(required)
        super().__init__(
            message or f"Required permission: {', '.join(required_list)}",
            details={"required": required_list},
        )
        self.required = required_list


# Infrastructure
class StorageError(RBACError):
    """Raised when the permission store fails."""
    pass


class StorageUnavailableError(StorageError):
    """Raised when the permission store times out or cannot be reached."""
    pass


class CacheError(RBACError):
    """Raised by cache backends; never escapes the permission cache."""
    pass


class InvalidationError(RBACError):
    """Raised by invalidation bus backends."""
    pass
