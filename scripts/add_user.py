"""
SaaS App: Admin User Registration Script

Registers a user through the passwordless signup flow, exactly as the web
layer would: slug generation, welcome email and mailing-list registration
included.

Usage:
    python scripts/add_user.py --uid 3f9c2a0e --email jane@example.com
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Resolve project root so this script can be run from any working directory
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from saas_app.accounts.errors import AccountError
from saas_app.accounts.user_repository import UserRepository
from saas_app.db import close_db, init_db
from saas_app.main import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a user via the passwordless signup flow.",
    )
    parser.add_argument(
        "--uid",
        type=str,
        required=True,
        help="User id issued by the passwordless identity provider.",
    )
    parser.add_argument(
        "--email",
        type=str,
        required=True,
        help="Email address of the new user (must not be registered yet).",
    )
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    configure_logging("WARNING")

    session_factory = await init_db()
    try:
        repo = UserRepository(session_factory)
        user = await repo.sign_in_or_sign_up_by_passwordless(uid=args.uid, email=args.email)
    except AccountError as e:
        print(f"Failed to create user: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        await close_db()

    print("User created successfully.")
    print(f"  id    = {user.id}")
    print(f"  email = {user.email}")
    print(f"  slug  = {user.slug}")


if __name__ == "__main__":
    asyncio.run(main())
