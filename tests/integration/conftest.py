"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.

Pre-condition: PostgreSQL and Redis running, `alembic upgrade head` applied.
The whole directory is skipped when either store is unreachable.
"""

import uuid
from collections.abc import Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.ft_common.database import async_session_factory, engine
from src.ft_common.redis_client import ping_redis
from src.ft_gateway.user.service import UserService
from src.main import app

PASSWORD = "TestPass1"


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client: keeps the engine pool alive."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        await ping_redis()
    except (OSError, SQLAlchemyError, RedisError) as exc:
        pytest.skip(f"PostgreSQL/Redis not reachable: {exc}")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _login(client: AsyncClient, username: str) -> dict[str, str]:
    resp = await client.post(
        "/api/v1/auth/login", json={"username": username, "password": PASSWORD}
    )
    token = resp.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def new_player(client: AsyncClient) -> Callable[[], Awaitable[tuple[str, dict[str, str]]]]:
    """Factory: register a fresh player, return (username, auth headers)."""

    async def _make() -> tuple[str, dict[str, str]]:
        username = f"player_{uuid.uuid4().hex[:8]}"
        resp = await client.post("/api/v1/auth/register", json={
            "username": username,
            "email": f"{username}@example.com",
            "password": PASSWORD,
        })
        assert resp.status_code == 201, resp.text
        return username, await _login(client, username)

    return _make


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def admin_headers(client: AsyncClient) -> dict[str, str]:
    """Admin accounts cannot be self-registered, so create one directly."""
    username = f"admin_{uuid.uuid4().hex[:8]}"
    async with async_session_factory() as session:
        async with session.begin():
            await UserService().register(
                username, f"{username}@example.com", PASSWORD, session, is_admin=True
            )
    return await _login(client, username)
