"""Alembic environment — async migration runner for the payments store.

Uses the same driver hooks as the running service, so REPO_DRIVER/REPO_URI
resolve to the same async URL here as at startup.

Design Decisions:
    - Reads settings from env (pydantic-settings), falls back to alembic.ini
    - Target metadata is built from the configured table and schema names
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from payments_api.config import get_settings
from payments_api.db.tables import build_items_table
from payments_api.infrastructure.sql_dialects import hooks_for

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

settings = get_settings()
target_metadata = build_items_table(settings.repo_table, settings.repo_schema).metadata


def _get_database_url() -> str:
    """Get the async DB URL from REPO_URI, or alembic.ini when unset."""
    if settings.repo_uri:
        return hooks_for(settings.repo_driver).database_url(settings.repo_uri)
    return config.get_main_option("sqlalchemy.url")


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Run migrations in 'online' mode with async engine."""
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
