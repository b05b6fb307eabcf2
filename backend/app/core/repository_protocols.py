"""Boundary Protocols — contracts between core services and storage.

Invariants:
    - Services NEVER import SQLAlchemy — dependency arrows point inward only
    - Every goal operation takes owner_id as a mandatory filter, never read from the payload
    - A goal owned by someone else is reported exactly like an absent one (None / False)
    - Documents are plain dicts with the field names of the public data model

Design Decisions:
    - Protocol over ABC: structural subtyping, in-memory fakes in tests need no base class
"""

from typing import Protocol

from app.core.domain_types import GoalId, IdentityId


class CredentialStore(Protocol):
    """Contract for user record persistence — implemented by shell."""
    async def find_by_email(self, email: str) -> dict | None: ...
    async def find_by_username(self, username: str) -> dict | None: ...
    async def insert(self, user_doc: dict) -> dict:
        """Persist a new user. Raises ConflictError on a uniqueness violation."""
        ...


class GoalRepository(Protocol):
    """Contract for owner-scoped goal persistence — implemented by shell."""
    async def insert(self, goal_doc: dict) -> dict: ...
    async def get(self, owner_id: IdentityId, goal_id: GoalId) -> dict | None: ...
    async def list(self, owner_id: IdentityId) -> list[dict]:
        """Goals of owner_id, newest first."""
        ...
    async def replace(self, owner_id: IdentityId, goal_doc: dict) -> dict | None: ...
    async def delete(self, owner_id: IdentityId, goal_id: GoalId) -> bool: ...
