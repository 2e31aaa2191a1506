"""Create every table directly from the table definitions.

Development shortcut; deployed databases are managed with ``scripts/migrate.py``.
Pass ``--admin <email>`` to promote an existing account to admin.
"""

import asyncio
import sys

from sqlalchemy import update

from app.database import engine
from app.models import metadata
from app.models.users import users


async def init_db(admin_email: str | None = None) -> None:
    """Create missing tables and optionally promote an admin."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        print(f"✓ {len(metadata.tables)} tables ready")

        if admin_email:
            result = await conn.execute(
                update(users)
                .where(users.c.email == admin_email)
                .values(role="admin", status="active")
            )
            if result.rowcount:
                print(f"✓ {admin_email} is now an admin")
            else:
                print(f"✗ No account with email {admin_email}", file=sys.stderr)

    await engine.dispose()


if __name__ == "__main__":
    email = None
    if len(sys.argv) == 3 and sys.argv[1] == "--admin":
        email = sys.argv[2]
    elif len(sys.argv) > 1:
        print("Usage: python scripts/init_db.py [--admin <email>]")
        sys.exit(2)
    asyncio.run(init_db(email))
