"""Admin API routers."""

from .roles import router as roles_router
from .teams import router as teams_router
from .users import router as users_router

__all__ = ["roles_router", "teams_router", "users_router"]
