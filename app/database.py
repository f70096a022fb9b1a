"""Database connection checks and Alembic migration helpers."""

import re
from pathlib import Path

from sqlalchemy import MetaData, inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from app.config import get_settings
from app.extensions import db


def check_db_connection(session: Session | None = None) -> bool:
    """Check if database connection is working.

    Pass the request session from a view so the check shares its connection.
    """
    try:
        if session is not None:
            return session.execute(text("SELECT 1")).scalar() == 1
        with db.engine.connect() as connection:
            return connection.execute(text("SELECT 1")).scalar() == 1
    except SQLAlchemyError:
        return False


def _get_alembic_config() -> Config:
    """Get Alembic configuration with database URL from Flask settings."""
    # Assume alembic.ini is in the project root (parent of app/)
    alembic_cfg_path = Path(__file__).parent.parent / "alembic.ini"

    config = Config(str(alembic_cfg_path))
    config.set_main_option("sqlalchemy.url", get_settings().DATABASE_URL)

    return config


def _read_revision(connection: Connection) -> str | None:
    if "alembic_version" not in inspect(connection).get_table_names():
        return None

    row = connection.execute(text("SELECT version_num FROM alembic_version")).fetchone()
    return row[0] if row else None


def _pending_revisions(script: ScriptDirectory, current_rev: str | None) -> list[str]:
    head_rev = script.get_current_head()
    if not head_rev or current_rev == head_rev:
        return []

    revisions = [
        rev.revision
        for rev in script.walk_revisions(base=current_rev or "base", head=head_rev)
        if rev.revision != current_rev
    ]
    revisions.reverse()  # Want chronological order
    return revisions


def get_current_revision() -> str | None:
    """Get current database revision from Alembic version table."""
    try:
        with db.engine.connect() as connection:
            return _read_revision(connection)
    except SQLAlchemyError:
        return None


def get_pending_migrations() -> list[str]:
    """Get list of pending migration revisions."""
    script = ScriptDirectory.from_config(_get_alembic_config())
    return _pending_revisions(script, get_current_revision())


def drop_all_tables(connection: Connection) -> None:
    """Drop all tables including Alembic version table."""
    # Use reflection to get all table names
    metadata = MetaData()
    metadata.reflect(bind=connection)
    metadata.drop_all(bind=connection)


def _get_migration_info(script_dir: ScriptDirectory, revision: str) -> tuple[str, str]:
    """Extract migration info from revision file."""
    rev_obj = script_dir.get_revision(revision)
    if not rev_obj or not rev_obj.path:
        return revision, "Unknown migration"

    migration_file = Path(rev_obj.path)
    if not migration_file.exists():
        return revision, "Migration file not found"

    # Description is the first docstring of the revision file
    docstring_match = re.search(r'"""([^"]+)"""', migration_file.read_text())
    if docstring_match:
        return revision[:7], docstring_match.group(1).strip().splitlines()[0]

    return revision[:7], "Migration"


def upgrade_database(recreate: bool = False) -> list[tuple[str, str]]:
    """Upgrade database with progress reporting.

    Args:
        recreate: If True, drop all tables first

    Returns:
        List of (revision, description) tuples for applied migrations
    """
    config = _get_alembic_config()
    script = ScriptDirectory.from_config(config)
    applied_migrations: list[tuple[str, str]] = []

    # One connection for the whole upgrade, shared with Alembic's env.py
    with db.engine.begin() as connection:
        config.attributes["connection"] = connection

        if recreate:
            print("🗑️  Dropping all tables...")
            drop_all_tables(connection)
            print("✅ All tables dropped")

        pending = _pending_revisions(script, _read_revision(connection))

        # Apply migrations one by one with progress reporting
        for revision in pending:
            rev_short, description = _get_migration_info(script, revision)
            print(f"⚡ Applying schema {rev_short} - {description}")

            try:
                command.upgrade(config, revision)
            except Exception as e:
                print(f"❌ Failed to apply migration {rev_short}: {e}")
                raise

            applied_migrations.append((rev_short, description))

    return applied_migrations
