"""Goal Routes — owner-scoped goal and subtask endpoints.

Invariants:
    - Every endpoint depends on require_identity, declared before the service dependency
    - The identity id from the token is the only owner passed to GoalService
    - Goals of other users answer 404, exactly like absent ones
"""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_goal_service, require_identity
from app.core.domain_types import IdentityId
from app.schemas.goal import (
    GoalCreate, GoalResponse, GoalUpdate, MessageResponse,
    SubTaskCreate, SubTaskUpdate,
)
from app.services.goal_service import GoalService

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.post(
    "", response_model=GoalResponse, status_code=status.HTTP_201_CREATED,
)
async def create_goal(
    body: GoalCreate,
    identity_id: IdentityId = Depends(require_identity),
    goals: GoalService = Depends(get_goal_service),
):
    return await goals.create_goal(identity_id, body)


@router.get("", response_model=list[GoalResponse])
async def list_goals(
    identity_id: IdentityId = Depends(require_identity),
    goals: GoalService = Depends(get_goal_service),
):
    """Goals of the caller, newest first."""
    return await goals.list_goals(identity_id)


@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(
    goal_id: str,
    identity_id: IdentityId = Depends(require_identity),
    goals: GoalService = Depends(get_goal_service),
):
    return await goals.get_goal(identity_id, goal_id)


@router.put("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: str,
    body: GoalUpdate,
    identity_id: IdentityId = Depends(require_identity),
    goals: GoalService = Depends(get_goal_service),
):
    """Apply the fields present in the body; progress is recomputed."""
    return await goals.update_goal(identity_id, goal_id, body)


@router.delete("/{goal_id}", response_model=MessageResponse)
async def delete_goal(
    goal_id: str,
    identity_id: IdentityId = Depends(require_identity),
    goals: GoalService = Depends(get_goal_service),
):
    await goals.delete_goal(identity_id, goal_id)
    return MessageResponse(message="Goal deleted successfully")


# ─── Subtasks ────────────────────────────────────────────────────

@router.post(
    "/{goal_id}/subtasks", response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_subtask(
    goal_id: str,
    body: SubTaskCreate,
    identity_id: IdentityId = Depends(require_identity),
    goals: GoalService = Depends(get_goal_service),
):
    return await goals.add_subtask(identity_id, goal_id, body)


@router.patch("/{goal_id}/subtasks/{subtask_id}", response_model=GoalResponse)
async def update_subtask(
    goal_id: str,
    subtask_id: str,
    body: SubTaskUpdate,
    identity_id: IdentityId = Depends(require_identity),
    goals: GoalService = Depends(get_goal_service),
):
    return await goals.update_subtask(identity_id, goal_id, subtask_id, body)


@router.delete("/{goal_id}/subtasks/{subtask_id}", response_model=GoalResponse)
async def remove_subtask(
    goal_id: str,
    subtask_id: str,
    identity_id: IdentityId = Depends(require_identity),
    goals: GoalService = Depends(get_goal_service),
):
    return await goals.remove_subtask(identity_id, goal_id, subtask_id)
