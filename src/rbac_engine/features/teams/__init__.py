"""Teams feature: teams group users and pass their roles on to members."""

from .entities import Team, TeamMember, TeamRole

__all__ = ["Team", "TeamMember", "TeamRole"]
