"""rbac-engine: effective-permission resolution for multi-tenant services.

Permissions come from direct roles, team-inherited roles and per-user
overrides (deny wins), are cached per user with a TTL, and are kept coherent
across instances through an invalidation bus.
"""

from .__version__ import __version__
from .config import PERMISSIONS, RBACSettings, get_settings
from .module import RBACEngine, create_engine

__all__ = [
    "__version__",
    "PERMISSIONS",
    "RBACSettings",
    "get_settings",
    "RBACEngine",
    "create_engine",
]
