import asyncio
import os
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from ladder.config import DEFAULT_DATABASE_URL
from ladder.database import Base
import ladder.models  # noqa: F401  registers the tables on Base.metadata

load_dotenv()

# Load Alembic Config
config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)
target_metadata = Base.metadata

# Migrations only need the database URL, not the full app settings (no JWT_SECRET)
DATABASE_URL = config.get_main_option("sqlalchemy.url") or os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def do_run_migrations(connection):
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online():
    """Run migrations over the same async driver the app uses."""
    connectable = create_async_engine(DATABASE_URL, poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


asyncio.run(run_migrations_online())
