"""Permission services."""

from .authorization_service import AuthorizationService
from .calculator import EffectivePermissionCalculator
from .override_service import OverrideService
from .role_service import RoleService
from .seed_service import SeedService

__all__ = [
    "AuthorizationService",
    "EffectivePermissionCalculator",
    "OverrideService",
    "RoleService",
    "SeedService",
]
