"""SQL Repositories — SQLAlchemy implementations of the credential store and goal repository.

Invariants:
    - Every goal statement carries `owner_id == :identity` in its WHERE clause
    - A unique-constraint violation on users is reported as ConflictError
    - Documents returned are plain dicts with timezone-aware UTC datetimes
    - Subtasks are stored as JSON (ISO-8601 datetimes) and returned with datetime objects
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import GoalId, IdentityId
from app.core.errors import ConflictError
from app.models.goal import Goal
from app.models.user import User

logger = logging.getLogger(__name__)

USER_FIELDS = (
    "id", "username", "email", "password_hash",
    "first_name", "last_name", "created_at", "updated_at",
)
GOAL_FIELDS = (
    "id", "owner_id", "title", "description", "subtasks", "start_date",
    "end_date", "completed", "progress", "created_at", "updated_at",
)
GOAL_MUTABLE_FIELDS = (
    "title", "description", "subtasks", "start_date", "end_date",
    "completed", "progress", "updated_at",
)
SUBTASK_DATETIME_FIELDS = ("due_date", "created_at", "updated_at")


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo; stored values are always UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _dump_subtasks(subtasks: list[dict]) -> list[dict]:
    dumped = []
    for subtask in subtasks:
        doc = dict(subtask)
        for key in SUBTASK_DATETIME_FIELDS:
            if isinstance(doc.get(key), datetime):
                doc[key] = as_utc(doc[key]).isoformat()
        dumped.append(doc)
    return dumped


def _load_subtasks(raw: list[dict] | None) -> list[dict]:
    loaded = []
    for subtask in raw or []:
        doc = dict(subtask)
        for key in SUBTASK_DATETIME_FIELDS:
            if isinstance(doc.get(key), str):
                doc[key] = as_utc(datetime.fromisoformat(doc[key]))
        loaded.append(doc)
    return loaded


def _user_document(row: User) -> dict:
    doc = {name: getattr(row, name) for name in USER_FIELDS}
    doc["created_at"] = as_utc(doc["created_at"])
    doc["updated_at"] = as_utc(doc["updated_at"])
    return doc


def _goal_document(row: Goal) -> dict:
    doc = {name: getattr(row, name) for name in GOAL_FIELDS}
    doc["subtasks"] = _load_subtasks(doc["subtasks"])
    for key in ("start_date", "end_date", "created_at", "updated_at"):
        doc[key] = as_utc(doc[key])
    return doc


def _conflict_from_integrity_error(error: IntegrityError) -> ConflictError:
    detail = str(error.orig).lower()
    if "email" in detail:
        return ConflictError("User with this email already exists", "email")
    if "username" in detail:
        return ConflictError("Username is already taken", "username")
    return ConflictError("Username or email is already taken", "username")


class SqlCredentialStore:
    """User records in the `users` table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def find_by_email(self, email: str) -> dict | None:
        result = await self._db.execute(select(User).where(User.email == email))
        row = result.scalar_one_or_none()
        return _user_document(row) if row else None

    async def find_by_username(self, username: str) -> dict | None:
        result = await self._db.execute(
            select(User).where(User.username == username),
        )
        row = result.scalar_one_or_none()
        return _user_document(row) if row else None

    async def insert(self, user_doc: dict) -> dict:
        row = User(**{k: v for k, v in user_doc.items() if k in USER_FIELDS})
        self._db.add(row)
        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            conflict = _conflict_from_integrity_error(e)
            logger.warning(
                f"User insert rejected by unique constraint on {conflict.field}",
            )
            raise conflict from e
        return _user_document(row)


class SqlGoalRepository:
    """Owner-scoped goal documents in the `goals` table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def _get_row(self, owner_id: IdentityId, goal_id: GoalId) -> Goal | None:
        result = await self._db.execute(
            select(Goal).where(Goal.id == goal_id, Goal.owner_id == owner_id),
        )
        return result.scalar_one_or_none()

    async def insert(self, goal_doc: dict) -> dict:
        values = {k: v for k, v in goal_doc.items() if k in GOAL_FIELDS}
        values["subtasks"] = _dump_subtasks(values.get("subtasks", []))
        row = Goal(**values)
        self._db.add(row)
        await self._db.commit()
        return _goal_document(row)

    async def get(self, owner_id: IdentityId, goal_id: GoalId) -> dict | None:
        row = await self._get_row(owner_id, goal_id)
        return _goal_document(row) if row else None

    async def list(self, owner_id: IdentityId) -> list[dict]:
        result = await self._db.execute(
            select(Goal)
            .where(Goal.owner_id == owner_id)
            .order_by(Goal.created_at.desc(), Goal.id.desc()),
        )
        return [_goal_document(row) for row in result.scalars().all()]

    async def replace(self, owner_id: IdentityId, goal_doc: dict) -> dict | None:
        row = await self._get_row(owner_id, goal_doc["id"])
        if row is None:
            return None
        for name in GOAL_MUTABLE_FIELDS:
            value = goal_doc[name]
            if name == "subtasks":
                value = _dump_subtasks(value)
            setattr(row, name, value)
        await self._db.commit()
        return _goal_document(row)

    async def delete(self, owner_id: IdentityId, goal_id: GoalId) -> bool:
        result = await self._db.execute(
            delete(Goal).where(Goal.id == goal_id, Goal.owner_id == owner_id),
        )
        await self._db.commit()
        return result.rowcount > 0
