"""Pydantic request/response schemas."""

from sweetshop.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserRole,
)
from sweetshop.schemas.errors import ErrorResponse, FieldErrorItem
from sweetshop.schemas.health import HealthResponse
from sweetshop.schemas.sweets import (
    MessageResponse,
    RestockRequest,
    SweetCategory,
    SweetInput,
    SweetOut,
    SweetSearch,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "ErrorResponse",
    "FieldErrorItem",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "RestockRequest",
    "SweetCategory",
    "SweetInput",
    "SweetOut",
    "SweetSearch",
    "UserRole",
]
