"""
Add version column to medicine_schedules

Databases created before optimistic update checks have no
medicine_schedules.version column. Existing rows start at version 1.

Run with: python migrations/add_medicine_schedule_version.py
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect, text


def _columns(conn) -> set:
    return {column["name"] for column in inspect(conn).get_columns("medicine_schedules")}


def upgrade(engine=None):
    """Add medicine_schedules.version if missing"""
    if engine is None:
        from medschedule.database import engine

    with engine.connect() as conn:
        # Check first so the migration can be re-run
        if "version" in _columns(conn):
            print("ℹ️  version column already exists")
            return

        conn.execute(text("""
            ALTER TABLE medicine_schedules
            ADD COLUMN version INTEGER NOT NULL DEFAULT 1
        """))
        conn.commit()
        print("✅ Added version column")


def downgrade(engine=None):
    """Remove medicine_schedules.version"""
    if engine is None:
        from medschedule.database import engine

    with engine.connect() as conn:
        if "version" not in _columns(conn):
            print("ℹ️  version column does not exist")
            return

        conn.execute(text("ALTER TABLE medicine_schedules DROP COLUMN version"))
        conn.commit()
        print("✅ Migration rolled back successfully!")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Manage medicine schedule version migration")
    parser.add_argument("--down", action="store_true", help="Rollback the migration")
    args = parser.parse_args()

    if args.down:
        print("Rolling back migration...")
        downgrade()
    else:
        print("Running migration...")
        upgrade()
