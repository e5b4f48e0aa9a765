"""CLI tool for admin operations.

Usage:
    python -m tradejournal.cli create-user
    python -m tradejournal.cli issue-token <username>
    python -m tradejournal.cli serve
"""

import sys
import getpass

import uvicorn
from sqlmodel import Session, select

from tradejournal.config import settings
from tradejournal.database import engine, create_db_and_tables
from tradejournal.models.user import User
from tradejournal.services.auth import hash_password, create_access_token
from tradejournal.utils.logging import setup_logging


def create_user():
    """Create a journal user with a password."""
    create_db_and_tables()

    username = input("Username: ").strip()
    if not username:
        print("Username cannot be empty.")
        sys.exit(1)

    with Session(engine) as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            print(f"User '{username}' already exists.")
            sys.exit(1)

    password = getpass.getpass("Password: ")
    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Passwords do not match.")
        sys.exit(1)

    user = User(username=username, hashed_password=hash_password(password))

    with Session(engine) as session:
        session.add(user)
        session.commit()
        session.refresh(user)

    print(f"\nUser '{username}' created with id {user.id}.")


def issue_token(username: str):
    """Print a bearer token for an existing user (scripting and local testing)."""
    with Session(engine) as session:
        user = session.exec(select(User).where(User.username == username)).first()
    if not user or not user.is_active:
        print(f"No active user '{username}'.")
        sys.exit(1)
    print(create_access_token(user.id))


def serve():
    """Run the API server."""
    uvicorn.run(
        "tradejournal.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def main():
    setup_logging()
    if len(sys.argv) < 2:
        print("Usage: python -m tradejournal.cli <command>")
        print("Commands: create-user, issue-token <username>, serve")
        sys.exit(1)

    command = sys.argv[1]
    if command == "create-user":
        create_user()
    elif command == "issue-token" and len(sys.argv) == 3:
        issue_token(sys.argv[2])
    elif command == "serve":
        serve()
    else:
        print(f"Unknown command: {' '.join(sys.argv[1:])}")
        sys.exit(1)


if __name__ == "__main__":
    main()
