#!/usr/bin/env python3
"""
Database Setup Script

Creates the users table, seeds the default HR/admin accounts and builds
the MongoDB indexes.
Usage: python scripts/init_db.py
"""
import sys
sys.path.insert(0, '.')

from ats.core.auth import seed_default_users
from ats.core.logging import configure_logging
from ats.db.mongodb import init_mongo_indexes
from ats.db.sql import init_sql_schema
from ats.services.user_repository import SqlUserRepository


def main():
    configure_logging()

    print("[1] Creating SQL schema...")
    init_sql_schema()
    print("    ✅ users table ready")

    print("[2] Seeding default users...")
    created = seed_default_users(SqlUserRepository())
    print(f"    ✅ {created} users created" if created else "    ⚠️  users already exist, skipped")

    print("[3] Creating MongoDB indexes...")
    init_mongo_indexes()
    print("    ✅ indexes ready")


if __name__ == "__main__":
    main()
