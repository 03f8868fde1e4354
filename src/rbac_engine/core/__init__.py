"""Core building blocks shared by all rbac-engine features."""
