"""Password hashing and the JWT token service used for authentication."""

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from pydantic import ValidationError as PydanticValidationError

from sweetshop.schemas.auth import CurrentUser

if TYPE_CHECKING:
    from sweetshop.core.config import Settings
    from sweetshop.models.user import User

logger = logging.getLogger(__name__)

# Session tokens are valid for a fixed 7 days; there is no refresh or revocation.
TOKEN_TTL = timedelta(days=7)

_REQUIRED_CLAIMS = ["sub", "role", "exp", "iat"]


def hash_password(plain_password: str, rounds: int = 12) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenService:
    """
    Issues and verifies signed session tokens.

    Holds no state besides the signing secret and algorithm taken from settings.
    """

    def __init__(self, settings: "Settings") -> None:
        self._secret = settings.JWT_SECRET.get_secret_value()
        self._algorithm = settings.JWT_ALGORITHM

    def issue(self, user: "User | CurrentUser", now: datetime | None = None) -> str:
        """Create a JWT carrying the user's id, username and role."""
        now = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "username": user.username,
            "role": user.role,
            "iat": now,
            "exp": now + TOKEN_TTL,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> CurrentUser | None:
        """
        Return the identity embedded in a valid token, or None.

        Never raises: malformed, expired, tampered and incomplete tokens all
        resolve to None so callers map the result straight to 401.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", e)
            return None
        try:
            return CurrentUser(
                id=int(payload["sub"]),
                username=payload.get("username", ""),
                role=payload["role"],
            )
        except (TypeError, ValueError, PydanticValidationError):
            return None
