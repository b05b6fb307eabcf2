"""API test fixtures — FastAPI test client over the in-memory test database.

Invariants:
    - get_db dependency overridden to use the test session factory
    - db_manager patched so readiness probes hit the test engine
    - Tokens are signed with the test secret the app's settings were loaded with
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.infrastructure.database import get_db, DatabaseSessionManager
import app.infrastructure.database as db_module
from app.main import app


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def register(client):
    """POST /api/auth/register and return the {token, user} body."""
    async def _register(username: str, email: str, password: str = "secret1") -> dict:
        res = await client.post("/api/auth/register", json={
            "username": username, "email": email, "password": password,
        })
        assert res.status_code == 201, res.text
        return res.json()
    return _register


@pytest.fixture
async def alice_headers(register) -> dict:
    body = await register("alice", "alice@example.com")
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
async def bob_headers(register) -> dict:
    body = await register("bob", "bob@example.com", "secret2")
    return {"Authorization": f"Bearer {body['token']}"}
