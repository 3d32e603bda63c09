#!/usr/bin/env python3
"""Create a user with proper password hashing."""

import sys

from backend.app.db.session import get_session_factory
from backend.app.db.users import DuplicateUserError, UserRepository
from backend.app.security.passwords import hash_password


def create_user(email: str, username: str, password: str):
    """Create a user; returns None when the password or identity is rejected."""
    factory = get_session_factory()
    session = factory()

    try:
        users = UserRepository(session)
        try:
            password_hash = hash_password(password)
        except ValueError as e:
            print(f"❌ {e}")
            return None

        try:
            user = users.create_user(
                email=email, username=username, password_hash=password_hash
            )
        except DuplicateUserError:
            print(f"❌ User {email} or {username} already exists")
            return None

        print(f"✅ Created user: {email}")
        print(f"   User ID: {user.id}")
        print(f"   Username: {user.username}")
        return user
    finally:
        session.close()


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print("Usage: python scripts/create_user.py <email> <username> <password>")
        print("Example: python scripts/create_user.py test@example.com tester mypassword123")
        sys.exit(1)

    if create_user(sys.argv[1], sys.argv[2], sys.argv[3]) is None:
        sys.exit(1)
