"""Alembic environment for the raw-SQL revisions in alembic/versions.

The URL comes from settings.DATABASE_URL unless overridden on the command
line, e.g. `alembic -x db_url=postgresql+asyncpg://... upgrade head`.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from config.settings import settings

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Revisions are hand-written SQL; there is no metadata to autogenerate from.
target_metadata = None


def _database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("db_url", settings.DATABASE_URL)


def _configure(**kwargs: object) -> None:
    context.configure(target_metadata=target_metadata, transaction_per_migration=True, **kwargs)


def run_offline() -> None:
    """Print the upgrade SQL instead of executing it (`alembic upgrade --sql`)."""
    _configure(url=_database_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    engine = create_async_engine(_database_url())
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_sync)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
