"""Core app configuration, database, errors and security."""

from sweetshop.core.config import Settings, get_settings
from sweetshop.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
