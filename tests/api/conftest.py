"""Fixtures for admin API tests."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from rbac_engine.api import create_app

TENANT_ID = "tenant-1"


@pytest_asyncio.fixture
async def default_roles(engine):
    """Default tenant roles, with ``admin`` holding Admin and ``viewer`` holding Viewer."""
    roles = await engine.seeder.seed_default_roles(TENANT_ID)
    await engine.roles.assign_role_to_user("admin", roles["Admin"].id)
    await engine.roles.assign_role_to_user("viewer", roles["Viewer"].id)
    return roles


@pytest_asyncio.fixture
async def client(engine, default_roles):
    app = create_app(engine=engine)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
