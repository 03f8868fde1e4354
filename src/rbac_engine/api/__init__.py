"""HTTP surface: admin routers, permission guards and error mapping."""

from .app import create_app
from .dependencies import Authorize, Identity, RequireAll, get_identity

__all__ = ["create_app", "Authorize", "Identity", "RequireAll", "get_identity"]
