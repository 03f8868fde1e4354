"""Team entities."""

from .team import Team, TeamMember, TeamRole

__all__ = ["Team", "TeamMember", "TeamRole"]
