"""Progress Engine — derives goal completion from subtask state.

Invariants:
    - PURE: no IO, input documents are never mutated
    - No subtasks → progress 0.0, completed False
    - completed is True iff every subtask is completed
    - recompute(recompute(g)) == recompute(g)
"""

from dataclasses import dataclass
from typing import Any, Mapping, Sequence


@dataclass(frozen=True)
class Progress:
    percent: float
    completed: bool


def compute_progress(subtasks: Sequence[Mapping[str, Any]]) -> Progress:
    """Completion percentage and overall flag for an ordered subtask list."""
    total = len(subtasks)
    if total == 0:
        return Progress(percent=0.0, completed=False)
    done = sum(1 for s in subtasks if s.get("completed"))
    return Progress(percent=100.0 * done / total, completed=done == total)


def recompute(goal: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of the goal document with progress and completed derived from subtasks."""
    progress = compute_progress(goal.get("subtasks") or [])
    return {
        **goal,
        "progress": progress.percent,
        "completed": progress.completed,
    }
