"""FastAPI dependencies: engine access, caller identity and permission guards.

Authentication happens upstream. The caller identity is read from
``request.state.user`` when an authentication middleware has set it, or from
the ``X-User-Id``/``X-Tenant-Id`` headers forwarded by a trusted gateway.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from fastapi import Depends, Request

from ..core.exceptions import AuthenticationRequiredError, PermissionDeniedError, RoleNotFoundError
from ..features.permissions.entities import Role
from ..features.permissions.services import (
    AuthorizationService,
    EffectivePermissionCalculator,
    OverrideService,
    RoleService,
)
from ..features.teams.services import TeamService
from ..module import RBACEngine


logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"
TENANT_ID_HEADER = "X-Tenant-Id"


@dataclass(frozen=True)
class Identity:
    """Authenticated caller."""

    user_id: str
    tenant_id: Optional[str] = None


def _read_attr(source: Any, *names: str) -> Optional[str]:
    for name in names:
        if isinstance(source, dict):
            value = source.get(name)
        else:
            value = getattr(source, name, None)
        if value:
            return str(value)
    return None


def get_identity(request: Request) -> Identity:
    """Resolve the caller or raise AuthenticationRequiredError."""
    user = getattr(request.state, "user", None)
    if user is not None:
        user_id = _read_attr(user, "id", "user_id", "userId")
        tenant_id = _read_attr(user, "tenant_id", "tenantId")
    else:
        user_id = request.headers.get(USER_ID_HEADER)
        tenant_id = request.headers.get(TENANT_ID_HEADER)

    if not user_id or not user_id.strip():
        raise AuthenticationRequiredError("Authentication required")
    return Identity(user_id=user_id.strip(), tenant_id=tenant_id.strip() if tenant_id else None)


def get_engine(request: Request) -> RBACEngine:
    return request.app.state.engine


def get_authorization_service(engine: RBACEngine = Depends(get_engine)) -> AuthorizationService:
    return engine.authorization


def get_calculator(engine: RBACEngine = Depends(get_engine)) -> EffectivePermissionCalculator:
    return engine.calculator


def get_role_service(engine: RBACEngine = Depends(get_engine)) -> RoleService:
    return engine.roles


def get_team_service(engine: RBACEngine = Depends(get_engine)) -> TeamService:
    return engine.teams


def get_override_service(engine: RBACEngine = Depends(get_engine)) -> OverrideService:
    return engine.overrides


async def get_visible_role(service: RoleService, role_id: str, identity: Identity) -> Role:
    """Load a role the caller's tenant may see; other tenants' roles are 404."""
    role = await service.get_role(role_id)
    if role.tenant_id is not None and role.tenant_id != identity.tenant_id:
        raise RoleNotFoundError(f"Role {role_id} not found", details={"role_id": role_id})
    return role


class Authorize:
    """Route guard passing when the caller holds ANY of the required codes.

    Responds 401 without an identity, 403 when the check fails and 503 when
    the permission store cannot answer. Returns the caller identity.

    Usage:
        @router.get("/tickets")
        async def list_tickets(identity: Identity = Depends(Authorize("tickets.read"))):
            ...
    """

    require_all = False

    def __init__(self, required: Union[str, List[str]]):
        self.required: List[str] = [required] if isinstance(required, str) else list(required)

    async def __call__(
        self,
        request: Request,
        authorization: AuthorizationService = Depends(get_authorization_service),
    ) -> Identity:
        identity = get_identity(request)

        if self.require_all:
            allowed = await authorization.has_all(identity.user_id, self.required)
        else:
            allowed = await authorization.has_any(identity.user_id, self.required)

        if not allowed:
            logger.warning(
                f"Permission denied for user {identity.user_id}: required={self.required}"
            )
            raise PermissionDeniedError(
                self.required,
                message=f"You need {'all' if self.require_all else 'one'} of the following "
                        f"permissions: {', '.join(self.required)}",
            )

        logger.debug(f"Permission granted for user {identity.user_id}: {self.required}")
        return identity


class RequireAll(Authorize):
    """Route guard passing only when the caller holds EVERY required code."""

    require_all = True

    def __init__(self, permissions: List[str]):
        super().__init__(list(permissions))
