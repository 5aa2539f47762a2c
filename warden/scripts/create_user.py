"""
Create a user (e.g. an extra admin). Run from project root:
  python -m warden.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m warden.scripts.create_user ops ops@corp.io your-secure-password admin
"""
import argparse
import sys

from pydantic import ValidationError

from warden.container import build_container
from warden.core.config import get_settings
from warden.core.validation import format_validation_errors
from warden.models.user import USER_ROLES
from warden.schemas.auth import RegisterRequest
from warden.services.directory import SqlUserDirectory, UserAlreadyExistsError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Warden user.")
    parser.add_argument("username", help="Username (3-50 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (at least 6 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=USER_ROLES)
    args = parser.parse_args(argv)

    try:
        body = RegisterRequest(username=args.username.strip(), email=args.email.strip(), password=args.password)
    except ValidationError as e:
        print(format_validation_errors(e.errors()), file=sys.stderr)
        return 1

    container = build_container(get_settings())
    db = container.session_factory()
    try:
        directory = SqlUserDirectory(db)
        if directory.find_by_username(body.username):
            print(f"User '{body.username}' already exists.", file=sys.stderr)
            return 1
        if directory.find_by_email(body.email):
            print(f"Email '{body.email}' already exists.", file=sys.stderr)
            return 1
        try:
            directory.create(
                username=body.username,
                email=body.email,
                password_hash=container.hasher.hash(body.password),
                role=args.role,
            )
        except UserAlreadyExistsError:
            print(f"User '{body.username}' already exists.", file=sys.stderr)
            return 1
        print(f"Created user '{body.username}' with role '{args.role}'.")
        return 0
    finally:
        db.close()
        container.close()


if __name__ == "__main__":
    sys.exit(main())
