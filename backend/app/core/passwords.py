"""Password Hashing — salted bcrypt with a fixed cost factor.

Invariants:
    - Only hashes are returned; plaintext never leaves these functions
    - verify_password compares via bcrypt.checkpw (constant time w.r.t. the stored hash)
    - bcrypt input is capped at 72 bytes; longer passwords are rejected at registration
      and never match at login
"""

from functools import lru_cache

import bcrypt

MIN_ROUNDS = 4
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int) -> str:
    if rounds < MIN_ROUNDS:
        raise ValueError(f"bcrypt rounds must be >= {MIN_ROUNDS}")
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password exceeds {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("ascii"))
    except ValueError:
        # corrupt or non-bcrypt stored hash
        return False


@lru_cache(maxsize=8)
def dummy_hash(rounds: int) -> str:
    """Hash checked against when no user matches, so lookups cost the same either way."""
    return hash_password("not-a-real-password", rounds)
