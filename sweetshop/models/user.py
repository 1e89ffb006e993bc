"""ORM model for shop accounts (auth and RBAC)."""

from sqlalchemy import CheckConstraint, Column, Integer, String

from sweetshop.models.base import Base


class User(Base):
    """
    Shop account. Created on registration (or by the create_user script) and
    never edited afterwards; only the bcrypt hash of the password is kept.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="role"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user", server_default="user")
