"""
Check the ZoneMinder database connection and report what this service can see.
With --create, creates the Events/Monitors/Storage tables (development databases only).
Usage: python scripts/setup/init_db.py [--create]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import create_tables, engine
from app.config import settings
from sqlalchemy import inspect, text


def main():
    parser = argparse.ArgumentParser(description="Check the review database")
    parser.add_argument("--create", action="store_true", help="Create tables on a dev database")
    args = parser.parse_args()

    print("🗄️  Review DB check")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nCheck DATABASE_URL in .env and that ZoneMinder's database is reachable.")
        sys.exit(1)

    if args.create:
        print("\n📋 Creating tables...")
        create_tables()
        print("✅ Events, Monitors and Storage tables ready")

    tables = set(inspect(engine).get_table_names())
    missing = {"Events", "Monitors", "Storage"} - tables
    if missing:
        print(f"\n⚠️  Missing tables: {', '.join(sorted(missing))}")
        sys.exit(1)

    with engine.connect() as conn:
        events = conn.execute(text("SELECT COUNT(*) FROM Events")).scalar()
        monitors = conn.execute(text("SELECT COUNT(*) FROM Monitors")).scalar()

    print(f"\n📊 {monitors} monitors, {events} events")
    print(f"🗂️  Storage strategy: {settings.STORAGE_STRATEGY}")
    print("\n🎉 Ready! Start the backend:")
    print("   uvicorn app.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
