"""Team administration endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status

from ...config.constants import PERMISSIONS
from ...core.exceptions import TeamNotFoundError, ValidationError
from ...features.permissions.services import RoleService
from ...features.teams.entities import Team
from ...features.teams.services import TeamService
from ..dependencies import Authorize, Identity, get_role_service, get_team_service, get_visible_role
from ..models import (
    AssignmentResponse,
    RoleResponse,
    TeamCreateRequest,
    TeamMemberRequest,
    TeamMembersResponse,
    TeamResponse,
    TeamRoleRequest,
    TeamUpdateRequest,
)


router = APIRouter(prefix="/teams", tags=["Teams"])


def _require_tenant(identity: Identity) -> str:
    if not identity.tenant_id:
        raise ValidationError("Tenant context required for team operations")
    return identity.tenant_id


async def _get_tenant_team(service: TeamService, team_id: str, identity: Identity) -> Team:
    team = await service.get_team(team_id)
    if team.tenant_id != _require_tenant(identity):
        raise TeamNotFoundError(f"Team {team_id} not found", details={"team_id": team_id})
    return team


@router.get("", response_model=List[TeamResponse], summary="List teams")
async def list_teams(
    identity: Identity = Depends(Authorize(PERMISSIONS.TEAMS_READ)),
    service: TeamService = Depends(get_team_service),
) -> List[TeamResponse]:
    teams = await service.list_teams(_require_tenant(identity))
    return [TeamResponse.from_entity(team) for team in teams]


@router.post(
    "",
    response_model=TeamResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create team",
)
async def create_team(
    payload: TeamCreateRequest,
    identity: Identity = Depends(Authorize(PERMISSIONS.TEAMS_CREATE)),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    team = await service.create_team(_require_tenant(identity), payload.name, payload.description)
    return TeamResponse.from_entity(team)


@router.put("/{team_id}", response_model=TeamResponse, summary="Update team")
async def update_team(
    team_id: str,
    payload: TeamUpdateRequest,
    identity: Identity = Depends(Authorize(PERMISSIONS.TEAMS_UPDATE)),
    service: TeamService = Depends(get_team_service),
) -> TeamResponse:
    await _get_tenant_team(service, team_id, identity)
    team = await service.update_team(team_id, name=payload.name, description=payload.description)
    return TeamResponse.from_entity(team)


@router.delete(
    "/{team_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete team",
    description="Delete a team; its members lose the roles inherited through it",
)
async def delete_team(
    team_id: str,
    identity: Identity = Depends(Authorize(PERMISSIONS.TEAMS_DELETE)),
    service: TeamService = Depends(get_team_service),
) -> None:
    await _get_tenant_team(service, team_id, identity)
    await service.delete_team(team_id)


@router.get("/{team_id}/members", response_model=TeamMembersResponse, summary="List team members")
async def list_members(
    team_id: str,
    identity: Identity = Depends(Authorize(PERMISSIONS.TEAMS_READ)),
    service: TeamService = Depends(get_team_service),
) -> TeamMembersResponse:
    await _get_tenant_team(service, team_id, identity)
    return TeamMembersResponse(team_id=team_id, user_ids=await service.list_members(team_id))


@router.post("/{team_id}/members", response_model=AssignmentResponse, summary="Add team member")
async def add_member(
    team_id: str,
    payload: TeamMemberRequest,
    identity: Identity = Depends(Authorize(PERMISSIONS.TEAMS_MANAGE_MEMBERS)),
    service: TeamService = Depends(get_team_service),
) -> AssignmentResponse:
    await _get_tenant_team(service, team_id, identity)
    return AssignmentResponse(changed=await service.add_team_member(team_id, payload.user_id))


@router.delete("/{team_id}/members/{user_id}", response_model=AssignmentResponse, summary="Remove team member")
async def remove_member(
    team_id: str,
    user_id: str,
    identity: Identity = Depends(Authorize(PERMISSIONS.TEAMS_MANAGE_MEMBERS)),
    service: TeamService = Depends(get_team_service),
) -> AssignmentResponse:
    await _get_tenant_team(service, team_id, identity)
    return AssignmentResponse(changed=await service.remove_team_member(team_id, user_id))


@router.get("/{team_id}/roles", response_model=List[RoleResponse], summary="List team roles")
async def list_team_roles(
    team_id: str,
    identity: Identity = Depends(Authorize(PERMISSIONS.TEAMS_READ)),
    service: TeamService = Depends(get_team_service),
) -> List[RoleResponse]:
    await _get_tenant_team(service, team_id, identity)
    roles = await service.list_team_roles(team_id)
    return [RoleResponse.from_entity(role) for role in roles]


@router.post("/{team_id}/roles", response_model=AssignmentResponse, summary="Assign role to team")
async def assign_team_role(
    team_id: str,
    payload: TeamRoleRequest,
    identity: Identity = Depends(Authorize(PERMISSIONS.TEAMS_ASSIGN_ROLES)),
    service: TeamService = Depends(get_team_service),
    roles: RoleService = Depends(get_role_service),
) -> AssignmentResponse:
    await _get_tenant_team(service, team_id, identity)
    await get_visible_role(roles, payload.role_id, identity)
    return AssignmentResponse(changed=await service.assign_role_to_team(team_id, payload.role_id))


@router.delete("/{team_id}/roles/{role_id}", response_model=AssignmentResponse, summary="Remove role from team")
async def remove_team_role(
    team_id: str,
    role_id: str,
    identity: Identity = Depends(Authorize(PERMISSIONS.TEAMS_ASSIGN_ROLES)),
    service: TeamService = Depends(get_team_service),
) -> AssignmentResponse:
    await _get_tenant_team(service, team_id, identity)
    return AssignmentResponse(changed=await service.remove_role_from_team(team_id, role_id))
