"""Auth Schemas — registration/login payloads and the public identity view.

Invariants:
    - UserResponse has no password field under any name
    - Field rules (username 3–30, email syntax, password ≥ 6, names ≤ 100) are enforced by IdentityService,
      so direct service callers get the same checks as HTTP callers
"""

from datetime import datetime

from pydantic import BaseModel, Field

NAME_MAX_LENGTH = 100


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str
    first_name: str | None = Field(None, max_length=NAME_MAX_LENGTH)
    last_name: str | None = Field(None, max_length=NAME_MAX_LENGTH)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    """Public identity — built from a user document, password_hash dropped."""
    id: str
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, doc: dict) -> "UserResponse":
        return cls(**{k: v for k, v in doc.items() if k != "password_hash"})


class AuthResponse(BaseModel):
    token: str
    user: UserResponse
