# Create the first dashboard admin account (tables are created if missing)
# Usage: set env DATABASE_URL (and ADMIN_USERNAME / ADMIN_PASSWORD), then run
# Example: ADMIN_USERNAME=admin ADMIN_PASSWORD=secret python scripts/create_admin.py

import asyncio
import os
import sys

from staffdir.core.db import AsyncSessionLocal, engine, init_db
from staffdir.core.exceptions import Conflict
from staffdir.services.users import create_user

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")


async def main() -> int:
    if not ADMIN_PASSWORD:
        print("ADMIN_PASSWORD environment variable is required", file=sys.stderr)
        return 1

    await init_db()
    async with AsyncSessionLocal() as session:
        try:
            user = await create_user(session, ADMIN_USERNAME, ADMIN_PASSWORD, role="admin")
        except Conflict:
            print(f"User {ADMIN_USERNAME!r} already exists")
            return 0
    await engine.dispose()

    print(f"Created admin user {user.username!r} (id={user.id})")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
