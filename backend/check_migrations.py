#!/usr/bin/env python3
"""
Check that the database is migrated: required tables exist and the stamped
alembic revision is the current head.

Usage: python check_migrations.py   (exit status 1 on any problem)
"""

import sys
from pathlib import Path
from typing import List, Optional

from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

BACKEND_DIR = Path(__file__).resolve().parent

REQUIRED_TABLES = ["tournament", "participant", "bracketsnapshot"]


def missing_tables(engine: Engine) -> List[str]:
    existing = set(inspect(engine).get_table_names())
    return [t for t in REQUIRED_TABLES if t not in existing]


def head_revision() -> Optional[str]:
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    return ScriptDirectory.from_config(config).get_current_head()


def current_revision(engine: Engine) -> Optional[str]:
    """Revision stamped in alembic_version, or None if never stamped."""
    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()


def migration_problems(engine: Engine) -> List[str]:
    problems = [f"Missing table: {t}" for t in missing_tables(engine)]
    head = head_revision()
    current = current_revision(engine)
    if current is None:
        problems.append(f"Database is not stamped (head is {head})")
    elif current != head:
        problems.append(f"Database is at revision {current}, head is {head}")
    return problems


if __name__ == "__main__":
    from tourney_admin.database import engine

    print(f"Database: {engine.url}")
    problems = migration_problems(engine)
    for problem in problems:
        print(f"✗ {problem}")
    if problems:
        print("Run migrations with: alembic upgrade head")
        sys.exit(1)
    print("✓ Schema is at head")
