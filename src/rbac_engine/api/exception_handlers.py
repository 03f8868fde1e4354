"""Exception handlers translating engine errors into JSON responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.exceptions import (
    AuthenticationRequiredError,
    PermissionDeniedError,
    RBACError,
    create_error_response,
    get_http_status_code,
)


logger = logging.getLogger(__name__)


async def authentication_required_handler(request: Request, exc: AuthenticationRequiredError) -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": "Authentication required"})


async def permission_denied_handler(request: Request, exc: PermissionDeniedError) -> JSONResponse:
    return JSONResponse(
        status_code=403,
        content={
            "error": "Permission denied",
            "required": exc.required,
            "message": exc.message,
        },
    )


async def rbac_error_handler(request: Request, exc: RBACError) -> JSONResponse:
    status_code = get_http_status_code(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error_code}: {exc.message}")
    return JSONResponse(status_code=status_code, content=create_error_response(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Register engine exception handlers on the application."""
    app.add_exception_handler(AuthenticationRequiredError, authentication_required_handler)
    app.add_exception_handler(PermissionDeniedError, permission_denied_handler)
    app.add_exception_handler(RBACError, rbac_error_handler)
