"""Register/login endpoints and auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sweetshop.api.deps import get_app_settings, get_credential_store, get_token_service
from sweetshop.core.config import Settings
from sweetshop.core.errors import Conflict, Forbidden, Unauthenticated
from sweetshop.core.security import TokenService, hash_password, verify_password
from sweetshop.schemas.auth import AuthResponse, CurrentUser, LoginRequest, RegisterRequest
from sweetshop.services.credentials import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    credentials: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthResponse:
    """
    Create an account and return a session token for it.
    Include the token in the Authorization header as: Bearer <token>
    """
    if credentials.find_by_username(body.username) is not None:
        raise Conflict("Username already exists")
    user = credentials.create_user(
        username=body.username,
        password_hash=hash_password(body.password, rounds=settings.BCRYPT_ROUNDS),
        role=body.role,
    )
    identity = CurrentUser.model_validate(user)
    return AuthResponse(token=tokens.issue(identity), user=identity)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    credentials: Annotated[CredentialStore, Depends(get_credential_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthResponse:
    """Authenticate with username and password; returns a session token."""
    user = credentials.find_by_username(body.username)
    if user is None or not verify_password(body.password, user.password_hash):
        logger.warning("Failed login for username=%r", body.username)
        raise Unauthenticated("Invalid username or password")
    identity = CurrentUser.model_validate(user)
    return AuthResponse(token=tokens.issue(identity), user=identity)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> CurrentUser:
    """Dependency: require a valid Bearer token and return its identity. Raises 401 if missing or invalid."""
    if credentials is None:
        raise Unauthenticated("Authentication required")
    identity = tokens.verify(credentials.credentials)
    if identity is None:
        raise Unauthenticated("Invalid or expired token")
    return identity


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != "admin":
        raise Forbidden("Admin access required")
    return current_user
