"""User permission endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from ...config.constants import PERMISSIONS
from ...features.permissions.services import (
    AuthorizationService,
    EffectivePermissionCalculator,
    OverrideService,
)
from ..dependencies import (
    Authorize,
    Identity,
    get_authorization_service,
    get_calculator,
    get_override_service,
)
from ..models import (
    AssignmentResponse,
    OverrideRequest,
    OverrideResponse,
    PermissionBreakdownResponse,
    UserPermissionsResponse,
)


router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/{user_id}/permissions",
    response_model=UserPermissionsResponse,
    summary="Get effective permissions",
)
async def get_user_permissions(
    user_id: str,
    identity: Identity = Depends(Authorize(PERMISSIONS.USERS_READ)),
    authorization: AuthorizationService = Depends(get_authorization_service),
) -> UserPermissionsResponse:
    permissions = await authorization.get_effective_permissions(user_id)
    return UserPermissionsResponse(user_id=user_id, permissions=sorted(permissions))


@router.get(
    "/{user_id}/permissions/breakdown",
    response_model=PermissionBreakdownResponse,
    summary="Explain effective permissions",
    description="Uncached computation listing the roles and overrides behind each permission",
)
async def get_permission_breakdown(
    user_id: str,
    identity: Identity = Depends(Authorize(PERMISSIONS.USERS_READ)),
    calculator: EffectivePermissionCalculator = Depends(get_calculator),
) -> PermissionBreakdownResponse:
    return PermissionBreakdownResponse.from_entity(await calculator.explain(user_id))


@router.get("/{user_id}/overrides", response_model=List[OverrideResponse], summary="List overrides")
async def list_overrides(
    user_id: str,
    identity: Identity = Depends(Authorize(PERMISSIONS.USERS_READ)),
    service: OverrideService = Depends(get_override_service),
) -> List[OverrideResponse]:
    overrides = await service.list_user_overrides(user_id)
    return [OverrideResponse.from_entity(o) for o in overrides]


@router.put("/{user_id}/overrides", response_model=OverrideResponse, summary="Set override")
async def set_override(
    user_id: str,
    payload: OverrideRequest,
    identity: Identity = Depends(Authorize(PERMISSIONS.USERS_UPDATE)),
    service: OverrideService = Depends(get_override_service),
) -> OverrideResponse:
    override = await service.set_user_permission_override(
        user_id, payload.permission_code, payload.allow, created_by=identity.user_id
    )
    return OverrideResponse.from_entity(override)


@router.delete(
    "/{user_id}/overrides/{permission_code}",
    response_model=AssignmentResponse,
    summary="Remove override",
)
async def remove_override(
    user_id: str,
    permission_code: str,
    identity: Identity = Depends(Authorize(PERMISSIONS.USERS_UPDATE)),
    service: OverrideService = Depends(get_override_service),
) -> AssignmentResponse:
    return AssignmentResponse(changed=await service.remove_user_permission_override(user_id, permission_code))
