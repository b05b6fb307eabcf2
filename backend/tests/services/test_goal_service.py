"""Goal Service — owner-scoped CRUD, subtasks and derived progress.

Tests cover:
    - create assigns the caller as owner and starts at progress 0
    - another owner's goal is indistinguishable from a missing one (NotFound)
    - malformed ids → InputValidationError
    - list returns only the caller's goals, newest first
    - partial updates touch only supplied fields; progress is never taken from input
    - subtask add/toggle/remove drive progress 0 → 50 → 100
"""

from datetime import datetime, timezone

import pytest

from app.core.errors import InputValidationError, ResourceNotFoundError
from app.schemas.goal import GoalCreate, GoalUpdate, SubTaskCreate, SubTaskUpdate


async def _goal(goal_service, owner, title="Run a marathon", **fields):
    return await goal_service.create_goal(owner, GoalCreate(title=title, **fields))


# ─── Create / Get ────────────────────────────────────────────────

async def test_create_goal_owned_by_caller(goal_service, alice):
    goal = await _goal(goal_service, alice, description="42km")
    assert goal.owner_id == alice
    assert goal.title == "Run a marathon"
    assert goal.description == "42km"
    assert goal.subtasks == []
    assert goal.progress == 0.0
    assert goal.completed is False


async def test_create_goal_defaults_start_date(goal_service, alice):
    before = datetime.now(timezone.utc)
    goal = await _goal(goal_service, alice)
    assert goal.start_date >= before.replace(microsecond=0)


async def test_create_goal_keeps_supplied_dates(goal_service, alice):
    start = datetime(2026, 3, 1, tzinfo=timezone.utc)
    end = datetime(2026, 9, 1, tzinfo=timezone.utc)
    goal = await _goal(goal_service, alice, start_date=start, end_date=end)
    fetched = await goal_service.get_goal(alice, goal.id)
    assert fetched.start_date == start
    assert fetched.end_date == end


async def test_get_own_goal(goal_service, alice):
    goal = await _goal(goal_service, alice)
    fetched = await goal_service.get_goal(alice, goal.id)
    assert fetched.id == goal.id


async def test_foreign_goal_is_not_found(goal_service, alice, bob):
    goal = await _goal(goal_service, alice)
    with pytest.raises(ResourceNotFoundError) as foreign:
        await goal_service.get_goal(bob, goal.id)
    assert foreign.value.resource_type == "Goal"


async def test_missing_goal_is_not_found(goal_service, alice, stranger):
    with pytest.raises(ResourceNotFoundError):
        await goal_service.get_goal(alice, stranger)


@pytest.mark.parametrize("goal_id", ["", "abc", "not-an-object-id", "G" * 24])
async def test_malformed_goal_id_rejected(goal_service, alice, goal_id):
    with pytest.raises(InputValidationError) as exc_info:
        await goal_service.get_goal(alice, goal_id)
    assert exc_info.value.field == "goal_id"


# ─── List ────────────────────────────────────────────────────────

async def test_list_returns_only_callers_goals_newest_first(goal_service, alice, bob):
    first = await _goal(goal_service, alice, title="first")
    second = await _goal(goal_service, alice, title="second")
    await _goal(goal_service, bob, title="bob's")

    goals = await goal_service.list_goals(alice)

    assert [g.id for g in goals] == [second.id, first.id]
    assert all(g.owner_id == alice for g in goals)


async def test_list_empty(goal_service, stranger):
    assert await goal_service.list_goals(stranger) == []


# ─── Update ──────────────────────────────────────────────────────

async def test_partial_update_changes_only_supplied_fields(goal_service, alice):
    goal = await _goal(goal_service, alice, description="42km")
    updated = await goal_service.update_goal(
        alice, goal.id, GoalUpdate(title="Run two marathons"),
    )
    assert updated.title == "Run two marathons"
    assert updated.description == "42km"
    assert updated.start_date == goal.start_date
    assert updated.updated_at >= goal.updated_at


async def test_null_fields_are_ignored(goal_service, alice):
    goal = await _goal(goal_service, alice, description="42km")
    updated = await goal_service.update_goal(
        alice, goal.id, GoalUpdate(title=None, description=None),
    )
    assert updated.title == goal.title
    assert updated.description == "42km"


async def test_empty_description_leaves_field_unchanged(goal_service, alice):
    goal = await _goal(goal_service, alice, description="42km")
    updated = await goal_service.update_goal(
        alice, goal.id, GoalUpdate(description=""),
    )
    assert updated.description == "42km"


async def test_supplied_completed_is_recomputed(goal_service, alice):
    goal = await _goal(goal_service, alice)
    updated = await goal_service.update_goal(
        alice, goal.id, GoalUpdate(completed=True),
    )
    assert updated.completed is False
    assert updated.progress == 0.0


async def test_update_foreign_goal_is_not_found(goal_service, alice, bob):
    goal = await _goal(goal_service, alice)
    with pytest.raises(ResourceNotFoundError):
        await goal_service.update_goal(bob, goal.id, GoalUpdate(title="mine now"))
    assert (await goal_service.get_goal(alice, goal.id)).title == goal.title


# ─── Delete ──────────────────────────────────────────────────────

async def test_delete_goal(goal_service, alice):
    goal = await _goal(goal_service, alice)
    await goal_service.delete_goal(alice, goal.id)
    with pytest.raises(ResourceNotFoundError):
        await goal_service.get_goal(alice, goal.id)


async def test_delete_foreign_goal_is_not_found_and_keeps_goal(goal_service, alice, bob):
    goal = await _goal(goal_service, alice)
    with pytest.raises(ResourceNotFoundError):
        await goal_service.delete_goal(bob, goal.id)
    assert (await goal_service.get_goal(alice, goal.id)).id == goal.id


async def test_delete_twice_is_not_found(goal_service, alice):
    goal = await _goal(goal_service, alice)
    await goal_service.delete_goal(alice, goal.id)
    with pytest.raises(ResourceNotFoundError):
        await goal_service.delete_goal(alice, goal.id)


async def test_delete_malformed_id_rejected(goal_service, alice):
    with pytest.raises(InputValidationError):
        await goal_service.delete_goal(alice, "nope")


# ─── Subtasks / Progress ─────────────────────────────────────────

async def test_subtasks_drive_progress(goal_service, alice):
    goal = await _goal(goal_service, alice)
    goal = await goal_service.add_subtask(alice, goal.id, SubTaskCreate(title="5k"))
    goal = await goal_service.add_subtask(alice, goal.id, SubTaskCreate(title="10k"))
    assert goal.progress == 0.0
    assert [s.title for s in goal.subtasks] == ["5k", "10k"]

    first, second = goal.subtasks
    goal = await goal_service.update_subtask(
        alice, goal.id, first.id, SubTaskUpdate(completed=True),
    )
    assert goal.progress == 50.0
    assert goal.completed is False

    goal = await goal_service.update_subtask(
        alice, goal.id, second.id, SubTaskUpdate(completed=True),
    )
    assert goal.progress == 100.0
    assert goal.completed is True

    fetched = await goal_service.get_goal(alice, goal.id)
    assert fetched.progress == 100.0
    assert fetched.completed is True


async def test_removing_open_subtask_completes_goal(goal_service, alice):
    goal = await _goal(goal_service, alice)
    goal = await goal_service.add_subtask(alice, goal.id, SubTaskCreate(title="5k"))
    goal = await goal_service.add_subtask(alice, goal.id, SubTaskCreate(title="10k"))
    done, open_ = goal.subtasks
    await goal_service.update_subtask(
        alice, goal.id, done.id, SubTaskUpdate(completed=True),
    )

    goal = await goal_service.remove_subtask(alice, goal.id, open_.id)

    assert [s.id for s in goal.subtasks] == [done.id]
    assert goal.progress == 100.0
    assert goal.completed is True


async def test_removing_last_subtask_resets_progress(goal_service, alice):
    goal = await _goal(goal_service, alice)
    goal = await goal_service.add_subtask(alice, goal.id, SubTaskCreate(title="5k"))
    await goal_service.update_subtask(
        alice, goal.id, goal.subtasks[0].id, SubTaskUpdate(completed=True),
    )
    goal = await goal_service.remove_subtask(alice, goal.id, goal.subtasks[0].id)
    assert goal.progress == 0.0
    assert goal.completed is False


async def test_subtask_partial_update_keeps_other_fields(goal_service, alice):
    due = datetime(2026, 6, 1, tzinfo=timezone.utc)
    goal = await _goal(goal_service, alice)
    goal = await goal_service.add_subtask(
        alice, goal.id, SubTaskCreate(title="5k", description="easy pace", due_date=due),
    )
    subtask = goal.subtasks[0]
    goal = await goal_service.update_subtask(
        alice, goal.id, subtask.id, SubTaskUpdate(title="5k tempo"),
    )
    assert goal.subtasks[0].title == "5k tempo"
    assert goal.subtasks[0].description == "easy pace"
    assert goal.subtasks[0].due_date == due
    assert goal.subtasks[0].completed is False


async def test_unknown_subtask_is_not_found(goal_service, alice, stranger):
    goal = await _goal(goal_service, alice)
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await goal_service.update_subtask(
            alice, goal.id, stranger, SubTaskUpdate(completed=True),
        )
    assert exc_info.value.resource_type == "SubTask"
    with pytest.raises(ResourceNotFoundError):
        await goal_service.remove_subtask(alice, goal.id, stranger)


async def test_malformed_subtask_id_rejected(goal_service, alice):
    goal = await _goal(goal_service, alice)
    with pytest.raises(InputValidationError) as exc_info:
        await goal_service.remove_subtask(alice, goal.id, "nope")
    assert exc_info.value.field == "subtask_id"


async def test_subtasks_of_foreign_goal_are_not_found(goal_service, alice, bob):
    goal = await _goal(goal_service, alice)
    with pytest.raises(ResourceNotFoundError):
        await goal_service.add_subtask(bob, goal.id, SubTaskCreate(title="sneaky"))
    assert (await goal_service.get_goal(alice, goal.id)).subtasks == []


async def test_stale_stored_progress_is_ignored(goal_service, goal_repository, alice):
    goal = await _goal(goal_service, alice)
    goal = await goal_service.add_subtask(alice, goal.id, SubTaskCreate(title="5k"))

    stored = await goal_repository.get(alice, goal.id)
    await goal_repository.replace(alice, {**stored, "progress": 87.0, "completed": True})

    fetched = await goal_service.get_goal(alice, goal.id)
    assert fetched.progress == 0.0
    assert fetched.completed is False
