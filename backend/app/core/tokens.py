"""Token Service — issues and verifies signed, time-limited identity tokens.

Invariants:
    - A token verifies only if its header algorithm equals the configured HMAC algorithm,
      its signature matches the server secret, and now < exp
    - Verification is local: one decode, one clock read, no IO, no side effects
    - Tokens are stateless — no revocation store; validity ends at natural expiry
    - Every failure surfaces as InvalidTokenError; the reason stays in logs

Design Decisions:
    - Expiry is checked against the injected clock rather than inside PyJWT so that
      issue/verify share one notion of "now"
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from app.config import AuthConfig
from app.core.domain_types import IdentityId, is_object_id
from app.core.errors import InvalidTokenError

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ("sub", "iat", "exp")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """HMAC-signed JWTs carrying the identity id as `sub`."""

    def __init__(self, config: AuthConfig, clock: Clock = utc_now):
        if not config.jwt_secret:
            raise ValueError("jwt_secret must not be empty")
        self._secret = config.jwt_secret
        self._algorithm = config.jwt_algorithm
        self._default_ttl_hours = config.token_ttl_hours
        self._clock = clock

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def issue(self, identity_id: str, ttl_hours: float | None = None) -> str:
        """Sign a token for identity_id valid for ttl_hours (configured default when None)."""
        if not is_object_id(identity_id):
            raise ValueError(f"Not an identity id: {identity_id!r}")
        ttl = self._default_ttl_hours if ttl_hours is None else ttl_hours
        if ttl <= 0:
            raise ValueError("ttl_hours must be positive")
        issued_at = int(self._clock().timestamp())
        expires_at = issued_at + int(timedelta(hours=ttl).total_seconds())
        payload = {"sub": identity_id, "iat": issued_at, "exp": expires_at}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> IdentityId:
        """Decode token back into its identity id or raise InvalidTokenError."""
        if not isinstance(token, str) or token.count(".") != 2:
            raise InvalidTokenError("malformed token")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"malformed header: {e}") from e
        if header.get("alg") != self._algorithm:
            raise InvalidTokenError(
                f"unexpected signing algorithm {header.get('alg')!r}",
            )

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": list(REQUIRED_CLAIMS),
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidSignatureError as e:
            raise InvalidTokenError("signature mismatch") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"decode failed: {e}") from e

        expires_at = claims["exp"]
        if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            raise InvalidTokenError("exp is not numeric")
        if self._clock().timestamp() >= expires_at:
            raise InvalidTokenError("token expired")

        subject = claims["sub"]
        if not is_object_id(subject):
            raise InvalidTokenError("subject is not an identity id")
        return IdentityId(subject)
