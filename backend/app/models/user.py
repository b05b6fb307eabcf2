"""User ORM — credential records.

Invariants:
    - id is a 24-hex string primary key
    - username and email carry unique constraints; the database is the final arbiter
      of uniqueness, not the service pre-check
    - password_hash holds a bcrypt hash, never plaintext
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.core.domain_types import new_object_id
from app.db.base import Base


class User(Base):
    """Registered identity."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(24), primary_key=True, default=new_object_id,
    )
    username: Mapped[str] = mapped_column(
        String(30), nullable=False, unique=True,
    )
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True,
    )
    password_hash: Mapped[str] = mapped_column(String(60), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
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
