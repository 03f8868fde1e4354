"""Team services."""

from .team_service import TeamService

__all__ = ["TeamService"]
