"""Auth Routes — registration and login.

Invariants:
    - Both endpoints are public (no bearer token required)
    - Responses carry {token, user}; user never includes the password hash
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_identity_service
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from app.services.identity_service import IdentityService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register", response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    identities: IdentityService = Depends(get_identity_service),
):
    """Create an identity and return it with a token."""
    result = await identities.register_user(
        body.username, body.email, body.password,
        first_name=body.first_name, last_name=body.last_name,
    )
    return AuthResponse(token=result.token, user=result.identity)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    identities: IdentityService = Depends(get_identity_service),
):
    """Exchange email + password for a token."""
    result = await identities.login_user(body.email, body.password)
    return AuthResponse(token=result.token, user=result.identity)
