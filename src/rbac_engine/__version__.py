"""Version information for rbac-engine."""

__version__ = "0.3.0"
