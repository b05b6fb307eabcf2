"""Request Dependencies — service wiring and the bearer-token guard for FastAPI routes.

Invariants:
    - require_identity runs before any service or DB dependency of a protected route
      (declared first) and raises UnauthorizedError instead of returning
    - The identity id is returned to the route and passed explicitly into services;
      nothing is stored on the request or in module state
    - TokenService is built once from the frozen settings; services are built per request
"""

from functools import lru_cache

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.authorization import authorize_request
from app.core.domain_types import IdentityId
from app.core.tokens import TokenService
from app.infrastructure.database import get_db
from app.infrastructure.repositories import SqlCredentialStore, SqlGoalRepository
from app.services.goal_service import GoalService
from app.services.identity_service import IdentityService


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(get_settings().auth_config())


async def require_identity(
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> IdentityId:
    """Access guard: `Authorization: Bearer <token>` → identity id, or 401."""
    return authorize_request(authorization, tokens)


async def get_identity_service(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> IdentityService:
    return IdentityService(
        SqlCredentialStore(db), tokens, settings.password_hash_rounds,
    )


async def get_goal_service(db: AsyncSession = Depends(get_db)) -> GoalService:
    return GoalService(SqlGoalRepository(db))
