"""FastAPI application factory for the RBAC admin API."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI

from ..__version__ import __version__
from ..config.settings import RBACSettings, get_settings
from ..module import RBACEngine, create_engine
from .dependencies import get_engine
from .exception_handlers import register_exception_handlers
from .models import HealthResponse
from .routers import roles_router, teams_router, users_router


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def create_app(
    settings: Optional[RBACSettings] = None,
    engine: Optional[RBACEngine] = None,
) -> FastAPI:
    """Create the admin API.

    When ``engine`` is given it is installed on ``app.state`` immediately and
    the caller owns its lifecycle; otherwise the lifespan builds one from
    settings and stops it on shutdown.
    """
    settings = settings or (engine.settings if engine else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = getattr(app.state, "engine", None) is None
        if owned:
            app.state.engine = await create_engine(settings)
        current: RBACEngine = app.state.engine

        await current.start()
        if settings.seed_on_startup:
            added = await current.seeder.seed_permissions()
            logger.info(f"Permission seed complete: {added} new permission(s)")

        yield

        if owned:
            await current.stop()
            app.state.engine = None

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Effective-permission resolution and role administration",
        lifespan=lifespan,
    )
    if engine is not None:
        app.state.engine = engine

    register_exception_handlers(app)

    app.include_router(roles_router, prefix=API_PREFIX)
    app.include_router(teams_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health(current: RBACEngine = Depends(get_engine)) -> HealthResponse:
        return HealthResponse(status="healthy", node_id=current.node_id, cache=current.cache.stats())

    logger.info(f"Created {settings.app_name} ({settings.environment})")
    return app
