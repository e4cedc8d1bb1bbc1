# alembic/env.py
from logging.config import fileConfig
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context
import asyncio
import os
import sys

# Make the project root importable when alembic runs from the repo root
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Importing the package registers every model on Base.metadata
from classroom_app.core.config import settings
from classroom_app.models import Base


config = context.config

# DATABASE_URL (through settings) wins over the .ini value
config.set_main_option('sqlalchemy.url', settings.database_url)

# Setup logging config from ini file
if config.config_file_name:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline():
    url = config.get_main_option('sqlalchemy.url')
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={'paramstyle': 'named'},
        render_as_batch=settings.is_sqlite,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_sync_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=settings.is_sqlite,
    )
    with context.begin_transaction():
        context.run_migrations()


async def do_async_migrations(connection):
    await connection.run_sync(do_sync_migrations)


def run_migrations_online():
    connectable = create_async_engine(
        config.get_main_option('sqlalchemy.url'),
        poolclass=pool.NullPool,
    )

    async def run_async():
        async with connectable.connect() as connection:
            await do_async_migrations(connection)
        await connectable.dispose()

    asyncio.run(run_async())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
