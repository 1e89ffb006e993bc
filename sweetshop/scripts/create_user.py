"""
Create a user (e.g. the first admin). Run from project root:
  python -m sweetshop.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m sweetshop.scripts.create_user admin your-secure-password admin
"""
import argparse
import sys

from dotenv import load_dotenv

from sweetshop.core.config import get_settings
from sweetshop.core.database import build_engine, build_session_factory
from sweetshop.core.errors import Conflict, InternalError
from sweetshop.core.security import hash_password
from sweetshop.schemas.auth import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from sweetshop.services.credentials import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Sweet Shop user directly in the database.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    load_dotenv()
    settings = get_settings()
    engine = build_engine(settings)
    db = build_session_factory(engine)()
    try:
        store = CredentialStore(db)
        if store.find_by_username(username) is not None:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        store.create_user(
            username=username,
            password_hash=hash_password(args.password, rounds=settings.BCRYPT_ROUNDS),
            role=args.role,
        )
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    except (Conflict, InternalError) as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
