"""SQLAlchemy ORM models."""

from sweetshop.models.base import Base
from sweetshop.models.sweet import Sweet
from sweetshop.models.user import User

__all__ = ["Base", "Sweet", "User"]
