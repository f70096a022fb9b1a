"""Tests for database upgrade helpers."""

from sqlalchemy import inspect

from app.database import get_current_revision, get_pending_migrations, upgrade_database
from app.extensions import db


def test_tables_exist_after_upgrade(app):
    """Rig history tables should be present after migrations run."""
    with app.app_context():
        inspector = inspect(db.engine)
        tables = set(inspector.get_table_names())
        expected = {"parts", "connections", "disposals", "rig_names", "rig_identities", "alembic_version"}
        assert expected.issubset(tables)


def test_upgrade_is_noop_at_head(app):
    """A database at head has nothing pending and upgrading applies nothing."""
    with app.app_context():
        assert get_current_revision() is not None
        assert get_pending_migrations() == []
        assert upgrade_database() == []


def test_upgrade_recreate_reapplies_all_migrations(app, capsys):
    """Recreating drops every table and applies the migrations from scratch."""
    with app.app_context():
        applied = upgrade_database(recreate=True)

        assert [revision for revision, _ in applied] == ["001"]
        assert "All tables dropped" in capsys.readouterr().out
        assert get_pending_migrations() == []
