"""Alembic environment for the Rig History Tracker backend."""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context
from app.extensions import db

# Import models to register them with SQLAlchemy metadata
import app.models  # noqa: F401,E402

config = context.config

# Shared connection from app.database.upgrade_database; the application owns logging then
connection = config.attributes.get("connection")

if connection is None and config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = db.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to stdout."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection) -> None:  # type: ignore[no-untyped-def]
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live database."""
    if connection is not None:
        _run_with_connection(connection)
        return

    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as new_connection:
        _run_with_connection(new_connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
