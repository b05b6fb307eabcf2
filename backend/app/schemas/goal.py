"""Goal Schemas — Pydantic models with field-level validation for goal and subtask payloads.

Invariants:
    - Titles: 1-200 chars after stripping, non-empty
    - Naive datetimes from clients are read as UTC
    - progress/completed appear only on responses; clients cannot set progress
    - Update payloads apply only the fields that are present, non-null and non-empty
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator


def _strip_title(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("title cannot be empty or whitespace")
    return v


def _utc(v: datetime | None) -> datetime | None:
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


class _PartialUpdate(BaseModel):
    def changes(self) -> dict:
        """Fields the client actually sent with a non-null, non-empty value."""
        return {
            k: v for k, v in self.model_dump(exclude_unset=True).items()
            if v is not None and v != ""
        }


class GoalCreate(BaseModel):
    """Goal creation — subtasks are added afterwards."""
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_title(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        return _utc(v)


class GoalUpdate(_PartialUpdate):
    """Partial goal update — absent or null fields are left untouched."""
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    start_date: datetime | None = None
    end_date: datetime | None = None
    completed: bool | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return _strip_title(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        return _utc(v)


class SubTaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    due_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_title(v)

    @field_validator("due_date")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        return _utc(v)


class SubTaskUpdate(_PartialUpdate):
    """Partial subtask update — toggling `completed` is the common case."""
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5_000)
    due_date: datetime | None = None
    completed: bool | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return _strip_title(v)

    @field_validator("due_date")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        return _utc(v)


class SubTaskResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    completed: bool
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime


class GoalResponse(BaseModel):
    """Goal as materialized for a client — always built from a recomputed document."""
    id: str
    owner_id: str
    title: str
    description: str | None = None
    subtasks: list[SubTaskResponse]
    start_date: datetime
    end_date: datetime | None = None
    completed: bool
    progress: float
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str
