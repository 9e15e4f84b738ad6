"""Register a user with email and password and print the access token.

Usage:
    uv run python -m scripts.create_test_user <email> [password]
If password is omitted, a random one is printed. With email confirmation
enabled on the project no token is issued until the address is confirmed.
"""

import asyncio
import secrets
import sys
from pathlib import Path

from dotenv import load_dotenv

from taskboard.core.config import get_settings
from taskboard.domain.exceptions import TaskboardException
from taskboard.infrastructure.supabase import DatabaseClientFactory


async def main() -> None:
    """Sign up the user through the configured auth service."""
    if len(sys.argv) < 2:
        print(
            "Usage: uv run python -m scripts.create_test_user <email> [password]",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    password = sys.argv[2] if len(sys.argv) > 2 else secrets.token_urlsafe(12)

    load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=True)
    get_settings.cache_clear()
    factory = DatabaseClientFactory(get_settings())
    client = factory.create()
    try:
        user = await client.auth.sign_up(email, password)
    except TaskboardException as e:
        print(f"Sign up failed: {e.message}", file=sys.stderr)
        sys.exit(1)
    finally:
        await client.aclose()
        await factory.aclose()

    print(f"Created user: {user.id} ({user.email})")
    print(f"Password: {password}")
    if client.auth.access_token:
        print(f"Access token: {client.auth.access_token}")
    else:
        print("No session issued (email confirmation pending)")


if __name__ == "__main__":
    asyncio.run(main())
