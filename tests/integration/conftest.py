"""Integration-test fixtures.

Require a migrated PostgreSQL and a Redis reachable through DATABASE_URL /
REDIS_URL. Tests here carry the `integration` marker, which the default
pytest run deselects; run them with `pytest -m integration`.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config.settings import settings
from src.main import app
from src.pe_gateway.auth.jwt_handler import create_access_token


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client: keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def identities() -> dict[str, str]:
    """Fresh seller/buyer identities so reruns never collide."""
    suffix = uuid.uuid4().hex[:8]
    return {"seller": f"seller-{suffix}", "buyer": f"buyer-{suffix}"}


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(settings.PLATFORM_OWNER_ID)}"}
