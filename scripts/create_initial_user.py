"""Utility script to create the first administrator account."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from backoffice.application.use_cases.users import create_user
from backoffice.domain.entities import ROLE_ADMIN
from backoffice.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create an initial administrator for the back-office API.",
    )
    parser.add_argument("--name", default="Administrator", help="Full name of the user")
    parser.add_argument(
        "--email", default="admin@example.com", help="Login email (default: admin@example.com)"
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Password for the user. Prompted interactively when omitted.",
    )
    parser.add_argument(
        "--role",
        default=ROLE_ADMIN,
        help="Role alias to assign (default: admin)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()

    password = args.password or getpass("Password: ")
    if not password:
        raise SystemExit("A password is required.")

    initialize_database()

    session = SessionLocal()
    try:
        user = create_user(
            session,
            name=args.name,
            email=args.email,
            password=password,
            role_alias=args.role,
            verified=True,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the user: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email}\n"
            f"  Role: {user.role.alias}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
