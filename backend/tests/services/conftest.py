"""Service test fixtures — services wired to SQL repositories over in-memory SQLite.

Invariants:
    - Services under test use the real SqlCredentialStore / SqlGoalRepository
    - Hashing uses bcrypt's minimum cost so registration stays fast
"""

import pytest

from app.core.domain_types import IdentityId, new_object_id
from app.infrastructure.repositories import SqlCredentialStore, SqlGoalRepository
from app.services.goal_service import GoalService
from app.services.identity_service import IdentityService

from tests.fakes import FAST_HASH_ROUNDS


@pytest.fixture
def credential_store(test_db) -> SqlCredentialStore:
    return SqlCredentialStore(test_db)


@pytest.fixture
def goal_repository(test_db) -> SqlGoalRepository:
    return SqlGoalRepository(test_db)


@pytest.fixture
def identity_service(credential_store, token_service) -> IdentityService:
    return IdentityService(credential_store, token_service, FAST_HASH_ROUNDS)


@pytest.fixture
def goal_service(goal_repository) -> GoalService:
    return GoalService(goal_repository)


@pytest.fixture
async def alice(identity_service) -> IdentityId:
    user = await identity_service.register("alice", "alice@example.com", "secret1")
    return IdentityId(user.id)


@pytest.fixture
async def bob(identity_service) -> IdentityId:
    user = await identity_service.register("bob", "bob@example.com", "secret2")
    return IdentityId(user.id)


@pytest.fixture
def stranger() -> IdentityId:
    """An identity id with no user row behind it."""
    return IdentityId(new_object_id())
