"""Credential store: lookup and creation of user accounts."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from sweetshop.core.errors import Conflict, InternalError
from sweetshop.models import User

logger = logging.getLogger(__name__)


class CredentialStore:
    """User records behind one SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> User | None:
        return self.session.scalars(
            select(User).where(User.username == username)
        ).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def create_user(self, username: str, password_hash: str, role: str = "user") -> User:
        """
        Insert a user. Raises Conflict if the username is taken.

        Callers pre-check with find_by_username; the unique index catches the
        race where two registrations for one name pass that check together.
        """
        user = User(username=username, password_hash=password_hash, role=role)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise Conflict("Username already exists", cause=e) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Failed to create user %r", username)
            raise InternalError(cause=e) from e
        logger.info("Created user id=%s username=%s role=%s", user.id, user.username, user.role)
        return user
