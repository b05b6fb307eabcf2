"""Identity Service — registration and login over the credential store.

Invariants:
    - Only the bcrypt hash is stored; plaintext passwords never reach the store or the logs
    - Login failures are indistinguishable: unknown email and wrong password both raise
      UnauthorizedError("Invalid email or password")
    - Duplicate username/email → ConflictError, from the pre-check or from the store's
      unique constraint when two registrations race
    - Returned identities never carry password_hash

Design Decisions:
    - bcrypt runs in a worker thread (asyncio.to_thread): hashing takes tens of
      milliseconds and would otherwise stall every other request on the loop
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.core.domain_types import new_object_id
from app.core.errors import ConflictError, InputValidationError, UnauthorizedError
from app.core.passwords import (
    MAX_PASSWORD_BYTES, dummy_hash, hash_password, verify_password,
)
from app.core.repository_protocols import CredentialStore
from app.core.tokens import TokenService
from app.schemas.auth import NAME_MAX_LENGTH, UserResponse

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6
LOGIN_FAILED_MESSAGE = "Invalid email or password"

_email_adapter = TypeAdapter(EmailStr)


@dataclass(frozen=True)
class AuthResult:
    """Identity plus a freshly issued token — what register/login hand back."""
    identity: UserResponse
    token: str


def validate_registration(
    username: str,
    email: str,
    password: str,
    first_name: str | None = None,
    last_name: str | None = None,
) -> None:
    """Field rules for a new identity. Raises InputValidationError on the first violation."""
    if not isinstance(username, str) or not (
        USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH
    ):
        raise InputValidationError(
            f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters",
            "username",
        )
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        raise InputValidationError("Email address is not valid", "email") from None
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        raise InputValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters", "password",
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InputValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes", "password",
        )
    for field, value in (("first_name", first_name), ("last_name", last_name)):
        if value is not None and len(value) > NAME_MAX_LENGTH:
            raise InputValidationError(
                f"{field} must be at most {NAME_MAX_LENGTH} characters", field,
            )


class IdentityService:
    """Registers and authenticates users; issues tokens for the boundary operations."""

    def __init__(
        self, store: CredentialStore, tokens: TokenService, hash_rounds: int,
    ):
        self._store = store
        self._tokens = tokens
        self._hash_rounds = hash_rounds

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserResponse:
        validate_registration(username, email, password, first_name, last_name)

        # Not atomic with the insert below; the unique index settles races.
        if await self._store.find_by_email(email):
            raise ConflictError("User with this email already exists", "email")
        if await self._store.find_by_username(username):
            raise ConflictError("Username is already taken", "username")

        password_hash = await asyncio.to_thread(
            hash_password, password, self._hash_rounds,
        )
        now = datetime.now(timezone.utc)
        stored = await self._store.insert({
            "id": new_object_id(),
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "first_name": first_name,
            "last_name": last_name,
            "created_at": now,
            "updated_at": now,
        })
        logger.info("User registered", extra={"identity_id": stored["id"]})
        return UserResponse.from_document(stored)

    async def authenticate(self, email: str, password: str) -> UserResponse:
        user = await self._store.find_by_email(email) if email else None
        if user is None:
            await asyncio.to_thread(self._check_dummy, password)
            raise UnauthorizedError(LOGIN_FAILED_MESSAGE)

        matches = await asyncio.to_thread(
            verify_password, password, user["password_hash"],
        )
        if not matches:
            logger.info("Login rejected", extra={"identity_id": user["id"]})
            raise UnauthorizedError(LOGIN_FAILED_MESSAGE)
        return UserResponse.from_document(user)

    def _check_dummy(self, password: str) -> bool:
        return verify_password(password, dummy_hash(self._hash_rounds))

    async def register_user(
        self,
        username: str,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> AuthResult:
        identity = await self.register(
            username, email, password, first_name, last_name,
        )
        return AuthResult(identity=identity, token=self._tokens.issue(identity.id))

    async def login_user(self, email: str, password: str) -> AuthResult:
        identity = await self.authenticate(email, password)
        return AuthResult(identity=identity, token=self._tokens.issue(identity.id))
