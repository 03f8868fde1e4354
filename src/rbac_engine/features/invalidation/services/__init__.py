"""Invalidation services."""

from .invalidator import PermissionInvalidator

__all__ = ["PermissionInvalidator"]
