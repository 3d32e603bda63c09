#!/usr/bin/env python3
"""
Generate HMAC secrets for JWT authentication.

Access and refresh tokens are signed with separate secrets; this prints a
fresh, distinct pair in ``.env`` format.

Usage:
    python scripts/generate_secrets.py
"""

import secrets


def generate_secret(num_bytes: int = 48) -> str:
    """Return a URL-safe random secret of ``num_bytes`` of entropy."""
    return secrets.token_urlsafe(num_bytes)


def main():
    """Generate and print an access/refresh secret pair."""
    access_secret = generate_secret()
    refresh_secret = generate_secret()
    while refresh_secret == access_secret:
        refresh_secret = generate_secret()

    print("=" * 80)
    print("JWT secrets (add to your .env file)")
    print("=" * 80)
    print()
    print(f"JWT_ACCESS_SECRET={access_secret}")
    print(f"JWT_REFRESH_SECRET={refresh_secret}")
    print()
    print("⚠️  Keep these secret. Rotating either one invalidates issued tokens.")


if __name__ == "__main__":
    main()
