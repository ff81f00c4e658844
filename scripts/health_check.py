#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the databases and SMTP account are reachable.
Usage: python scripts/health_check.py
"""
import asyncio
import sys
sys.path.insert(0, '.')

from ats.core.config import get_settings
from ats.core.exceptions import AtsError
from ats.db.mongodb import check_mongo_connection
from ats.db.sql import check_sql_connection
from ats.services.email_service import EmailService, SmtpSender
from ats.services.pdf_generator import resolve_font_path


def main():
    settings = get_settings()
    print("=" * 50)
    print("SAIL APPLICANT TRACKING - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Checking SQL...")
    if settings.use_sqlite:
        print(f"    SQLite: {settings.sqlite_path}")
    else:
        print(f"    URL: postgresql://{settings.sql_user}:****@{settings.sql_host}:{settings.sql_port}/{settings.sql_database}")
    print("    ✅ SQL: CONNECTED" if check_sql_connection() else "    ❌ SQL: FAILED")

    print("\n[2] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    print("    ✅ MongoDB: CONNECTED" if check_mongo_connection() else "    ❌ MongoDB: FAILED")

    print("\n[3] Checking form font...")
    try:
        print(f"    ✅ Font: {resolve_font_path()}")
    except AtsError as e:
        print(f"    ❌ Font: {e}")

    print("\n[4] Checking SMTP...")
    if settings.email_configured:
        print(f"    Server: {settings.email_host}:{settings.email_port}")
        service = EmailService(settings, SmtpSender(settings))
        try:
            asyncio.run(service.verify())
            print("    ✅ SMTP: CONNECTED")
        except AtsError as e:
            print(f"    ❌ SMTP: {e}")
    else:
        print("    ⚠️  SMTP: EMAIL_USER/EMAIL_PASS not configured")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
