"""Request/response schemas for auth endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

UserRole = Literal["user", "admin"]

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


class RegisterRequest(BaseModel):
    """New account. role defaults to 'user'."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Username",
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )
    role: UserRole = Field(default="user", description="Account role")


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN, description="Username")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class CurrentUser(BaseModel):
    """Authenticated identity (id, username, role) carried by the session token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: UserRole


class AuthResponse(BaseModel):
    """Session token plus the account it belongs to (never the password hash)."""

    token: str = Field(..., description="JWT bearer token, valid for 7 days")
    user: CurrentUser
