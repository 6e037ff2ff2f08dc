import argparse
import sys

from contest_api.database import SessionLocal, init_db
from contest_api.logging_setup import setup_console_logging
from contest_api.models.db.user import UserRole
from contest_api.services.auth_service import (
    create_user,
    get_user_by_email,
    get_user_by_username,
)

setup_console_logging()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Contest platform administration")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create-user", help="Create a user with a given role")
    create.add_argument("username")
    create.add_argument("email")
    create.add_argument("password")
    create.add_argument(
        "--role",
        choices=[UserRole.ADMIN.value, UserRole.NORMAL.value, UserRole.VIP.value],
        default=UserRole.NORMAL.value,
        help="Role of the new user",
    )

    subparsers.add_parser("init-db", help="Create database tables")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    init_db()
    if args.command == "init-db":
        print("Database initialized")
        return 0

    db = SessionLocal()
    try:
        if get_user_by_username(db, args.username) or get_user_by_email(db, args.email):
            print("User already exists", file=sys.stderr)
            return 1
        user = create_user(db, args.username, args.email, args.password, args.role)
        print(f"Created user {user.username} (id={user.id}, role={user.role})")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
