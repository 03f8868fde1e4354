"""Feature modules of rbac-engine."""
