#!/usr/bin/env python3
"""
Check which database the test suite will use.

Without ``TEST_DATABASE_URL`` the suite runs on in-memory SQLite. When it is
set, it must never point at the application database because every test
drops and recreates all tables.
"""

import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def main() -> int:
    """Validate the test database configuration."""
    from dotenv import load_dotenv

    load_dotenv()

    app_db = os.getenv("DATABASE_URL")
    test_db = os.getenv("TEST_DATABASE_URL")

    print("Test database configuration")
    print(f"   Application DB: {app_db}")
    print(f"   Test DB:        {test_db or 'sqlite+aiosqlite:///:memory: (default)'}")
    print()

    if not test_db:
        print("✅ Tests will use in-memory SQLite.")
        print("   Set TEST_DATABASE_URL to run them against PostgreSQL instead.")
        return 0

    if test_db == app_db:
        print("❌ TEST_DATABASE_URL equals DATABASE_URL.")
        print("   The suite drops every table; point it at a separate database.")
        return 1

    if test_db.startswith("postgresql") and "test" not in test_db.lower():
        print("⚠️  The test database name does not contain 'test'.")
        print("   Consider a name like precta_test.")

    print("✅ Test database configuration looks good. Run: pytest")
    return 0


if __name__ == "__main__":
    sys.exit(main())
