"""Goal ORM — a user's goal with its ordered subtasks embedded.

Invariants:
    - owner_id is non-nullable and indexed; every query filters on it
    - subtasks is an ordered JSON array of subtask documents (no table of their own —
      subtasks have no lifecycle outside their goal)
    - progress/completed columns are written from the Progress Engine on every save

Design Decisions:
    - JSON column for subtasks: the goal is read and written as one document
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, Float, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.core.domain_types import new_object_id
from app.db.base import Base


class Goal(Base):
    """Goal document owned by exactly one user."""
    __tablename__ = "goals"
    __table_args__ = (
        Index("ix_goals_owner_created", "owner_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(24), primary_key=True, default=new_object_id,
    )
    owner_id: Mapped[str] = mapped_column(
        String(24), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    subtasks: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    progress: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
