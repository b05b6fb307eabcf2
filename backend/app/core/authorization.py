"""Access Guard — turns a raw Authorization header into an authenticated identity id.

Invariants:
    - Accepted shape is exactly "Bearer <token>": two parts split on a single space,
      scheme keyword case-sensitive
    - Any other shape, a missing header, or a rejected token → UnauthorizedError
    - Nothing downstream runs before this returns; the id is handed back to the caller,
      never stored
"""

from app.core.domain_types import IdentityId
from app.core.errors import UnauthorizedError
from app.core.tokens import TokenService

BEARER_SCHEME = "Bearer"


def parse_bearer(raw_header: str | None) -> str:
    """Extract the token from a bearer header value."""
    if not raw_header:
        raise UnauthorizedError("Authorization header is required")
    parts = raw_header.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        raise UnauthorizedError("Authorization header format must be Bearer {token}")
    return parts[1]


def authorize_request(raw_header: str | None, tokens: TokenService) -> IdentityId:
    return tokens.verify(parse_bearer(raw_header))
