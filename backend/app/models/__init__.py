"""ORM Models — SQLAlchemy declarative models for users and goals.

Invariants:
    - All models inherit from Base (db/base.py)
    - Goal rows are scoped by owner_id → users.id

Design Decisions:
    - All models imported here so Base.metadata holds every table before create_all
      or a migration autogenerate runs
"""

from app.models.user import User  # noqa: F401
from app.models.goal import Goal  # noqa: F401
