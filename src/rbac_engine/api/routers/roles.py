"""Role administration endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from ...config.constants import PERMISSIONS
from ...features.permissions.services import RoleService
from ..dependencies import Authorize, Identity, get_role_service, get_visible_role
from ..models import (
    AssignmentResponse,
    PermissionResponse,
    RoleCreateRequest,
    RoleDeleteRequest,
    RoleDeleteResponse,
    RoleResponse,
    RoleUpdateRequest,
    UserRoleRequest,
)


router = APIRouter(prefix="/roles", tags=["Roles"])


@router.get(
    "",
    response_model=List[RoleResponse],
    summary="List roles",
    description="List the caller's tenant roles and global roles with their permission codes",
)
async def list_roles(
    identity: Identity = Depends(Authorize(PERMISSIONS.ROLES_READ)),
    service: RoleService = Depends(get_role_service),
) -> List[RoleResponse]:
    roles = await service.list_roles(identity.tenant_id)
    return [RoleResponse.from_entity(role) for role in roles]


@router.get(
    "/permissions",
    response_model=List[PermissionResponse],
    summary="List permissions",
    description="List every registered permission code",
)
async def list_permissions(
    identity: Identity = Depends(Authorize(PERMISSIONS.ROLES_READ)),
    service: RoleService = Depends(get_role_service),
) -> List[PermissionResponse]:
    permissions = await service.list_permissions()
    return [PermissionResponse.from_entity(p) for p in permissions]


@router.get("/{role_id}", response_model=RoleResponse, summary="Get role")
async def get_role(
    role_id: str,
    identity: Identity = Depends(Authorize(PERMISSIONS.ROLES_READ)),
    service: RoleService = Depends(get_role_service),
) -> RoleResponse:
    return RoleResponse.from_entity(await get_visible_role(service, role_id, identity))


@router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
    description="Create a tenant role; every permission code must be registered",
)
async def create_role(
    payload: RoleCreateRequest,
    identity: Identity = Depends(Authorize(PERMISSIONS.ROLES_CREATE)),
    service: RoleService = Depends(get_role_service),
) -> RoleResponse:
    role = await service.create_role(
        tenant_id=identity.tenant_id,
        name=payload.name,
        description=payload.description,
        permission_codes=payload.permission_codes,
    )
    return RoleResponse.from_entity(role)


@router.put(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Update role",
    description="Update role fields; a permission code list replaces all current permissions",
)
async def update_role(
    role_id: str,
    payload: RoleUpdateRequest,
    identity: Identity = Depends(Authorize(PERMISSIONS.ROLES_UPDATE)),
    service: RoleService = Depends(get_role_service),
) -> RoleResponse:
    await get_visible_role(service, role_id, identity)
    role = await service.update_role(
        role_id,
        name=payload.name,
        description=payload.description,
        permission_codes=payload.permission_codes,
    )
    return RoleResponse.from_entity(role)


@router.delete(
    "/{role_id}",
    response_model=RoleDeleteResponse,
    summary="Delete role",
    description="Delete a role; assigned roles need forceReassignTo naming a replacement",
)
async def delete_role(
    role_id: str,
    payload: Optional[RoleDeleteRequest] = None,
    identity: Identity = Depends(Authorize(PERMISSIONS.ROLES_DELETE)),
    service: RoleService = Depends(get_role_service),
) -> RoleDeleteResponse:
    await get_visible_role(service, role_id, identity)
    reassign_to = payload.force_reassign_to if payload else None
    if reassign_to is not None:
        await get_visible_role(service, reassign_to, identity)
    affected = await service.delete_role(role_id, force_reassign_to=reassign_to)
    return RoleDeleteResponse(
        role_id=role_id, reassigned_to=reassign_to, invalidated_users=len(affected)
    )


@router.post("/{role_id}/assign", response_model=AssignmentResponse, summary="Assign role to user")
async def assign_role(
    role_id: str,
    payload: UserRoleRequest,
    identity: Identity = Depends(Authorize(PERMISSIONS.ROLES_ASSIGN)),
    service: RoleService = Depends(get_role_service),
) -> AssignmentResponse:
    await get_visible_role(service, role_id, identity)
    changed = await service.assign_role_to_user(payload.user_id, role_id, assigned_by=identity.user_id)
    return AssignmentResponse(changed=changed)


@router.post("/{role_id}/revoke", response_model=AssignmentResponse, summary="Revoke role from user")
async def revoke_role(
    role_id: str,
    payload: UserRoleRequest,
    identity: Identity = Depends(Authorize(PERMISSIONS.ROLES_REVOKE)),
    service: RoleService = Depends(get_role_service),
) -> AssignmentResponse:
    await get_visible_role(service, role_id, identity)
    changed = await service.revoke_role_from_user(payload.user_id, role_id)
    return AssignmentResponse(changed=changed)
