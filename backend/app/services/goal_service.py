"""Goal Service — owner-scoped goal and subtask operations.

Invariants:
    - identity_id is always an explicit argument and the only source of ownership;
      owner_id in any payload is ignored
    - Missing and foreign goals both raise ResourceNotFoundError("Goal", id)
    - Every write persists a recomputed document; every read recomputes again before
      building the response, so stored progress is never trusted
    - Malformed goal/subtask ids → InputValidationError (they cannot name any document)
"""

import logging
from datetime import datetime, timezone

from app.core.domain_types import GoalId, IdentityId, is_object_id, new_object_id
from app.core.errors import InputValidationError, ResourceNotFoundError
from app.core.progress import recompute
from app.core.repository_protocols import GoalRepository
from app.schemas.goal import (
    GoalCreate, GoalResponse, GoalUpdate, SubTaskCreate, SubTaskUpdate,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _require_id(value: str, field: str) -> None:
    if not is_object_id(value):
        raise InputValidationError(f"Invalid {field}", field)


def materialize(goal_doc: dict) -> GoalResponse:
    """Recompute derived fields and build the client view."""
    return GoalResponse(**recompute(goal_doc))


class GoalService:
    """CRUD over goals and their subtasks for one authenticated identity per call."""

    def __init__(self, goals: GoalRepository):
        self._goals = goals

    async def _load(self, identity_id: IdentityId, goal_id: str) -> dict:
        _require_id(goal_id, "goal_id")
        goal = await self._goals.get(identity_id, GoalId(goal_id))
        if goal is None:
            raise ResourceNotFoundError("Goal", goal_id)
        return goal

    async def _save(self, identity_id: IdentityId, goal: dict) -> GoalResponse:
        goal["updated_at"] = _now()
        stored = await self._goals.replace(identity_id, recompute(goal))
        if stored is None:
            # deleted between load and save
            raise ResourceNotFoundError("Goal", goal["id"])
        return materialize(stored)

    # ─── Goals ───────────────────────────────────────────────────

    async def create_goal(
        self, identity_id: IdentityId, fields: GoalCreate,
    ) -> GoalResponse:
        now = _now()
        goal = recompute({
            "id": new_object_id(),
            "owner_id": identity_id,
            "title": fields.title,
            "description": fields.description,
            "subtasks": [],
            "start_date": fields.start_date or now,
            "end_date": fields.end_date,
            "created_at": now,
            "updated_at": now,
        })
        stored = await self._goals.insert(goal)
        logger.info(
            "Goal created",
            extra={"identity_id": identity_id, "goal_id": stored["id"]},
        )
        return materialize(stored)

    async def get_goal(self, identity_id: IdentityId, goal_id: str) -> GoalResponse:
        return materialize(await self._load(identity_id, goal_id))

    async def list_goals(self, identity_id: IdentityId) -> list[GoalResponse]:
        return [materialize(g) for g in await self._goals.list(identity_id)]

    async def update_goal(
        self, identity_id: IdentityId, goal_id: str, partial: GoalUpdate,
    ) -> GoalResponse:
        goal = await self._load(identity_id, goal_id)
        # a supplied `completed` is written, then recomputed from subtasks in _save
        goal.update(partial.changes())
        return await self._save(identity_id, goal)

    async def delete_goal(self, identity_id: IdentityId, goal_id: str) -> None:
        _require_id(goal_id, "goal_id")
        if not await self._goals.delete(identity_id, GoalId(goal_id)):
            raise ResourceNotFoundError("Goal", goal_id)
        logger.info(
            "Goal deleted", extra={"identity_id": identity_id, "goal_id": goal_id},
        )

    # ─── Subtasks ────────────────────────────────────────────────

    async def add_subtask(
        self, identity_id: IdentityId, goal_id: str, fields: SubTaskCreate,
    ) -> GoalResponse:
        goal = await self._load(identity_id, goal_id)
        now = _now()
        goal["subtasks"] = [*goal["subtasks"], {
            "id": new_object_id(),
            "title": fields.title,
            "description": fields.description,
            "completed": False,
            "due_date": fields.due_date,
            "created_at": now,
            "updated_at": now,
        }]
        return await self._save(identity_id, goal)

    async def update_subtask(
        self,
        identity_id: IdentityId,
        goal_id: str,
        subtask_id: str,
        partial: SubTaskUpdate,
    ) -> GoalResponse:
        _require_id(subtask_id, "subtask_id")
        goal = await self._load(identity_id, goal_id)
        changes = partial.changes()
        found = False
        subtasks = []
        for subtask in goal["subtasks"]:
            if subtask["id"] == subtask_id:
                subtask = {**subtask, **changes, "updated_at": _now()}
                found = True
            subtasks.append(subtask)
        if not found:
            raise ResourceNotFoundError("SubTask", subtask_id)
        goal["subtasks"] = subtasks
        return await self._save(identity_id, goal)

    async def remove_subtask(
        self, identity_id: IdentityId, goal_id: str, subtask_id: str,
    ) -> GoalResponse:
        _require_id(subtask_id, "subtask_id")
        goal = await self._load(identity_id, goal_id)
        remaining = [s for s in goal["subtasks"] if s["id"] != subtask_id]
        if len(remaining) == len(goal["subtasks"]):
            raise ResourceNotFoundError("SubTask", subtask_id)
        goal["subtasks"] = remaining
        return await self._save(identity_id, goal)
