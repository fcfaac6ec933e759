# alembic/env.py
from logging.config import fileConfig
import asyncio

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from app.db.base import Base
import app.db.models  # noqa: F401  (registers every table on Base.metadata)
from app.config.settings import settings

#####################################################################
# 1.  URLs
#####################################################################

ASYNC_URL = settings.database_url                                      # postgresql+asyncpg://...
SYNC_URL = ASYNC_URL.replace("+asyncpg", "").replace("+aiosqlite", "")  # offline SQL rendering only
IS_SQLITE = ASYNC_URL.startswith("sqlite")

config = context.config
config.set_main_option("sqlalchemy.url", SYNC_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

#####################################################################
# 2.  Offline migrations (emit SQL, no DB connection)
#####################################################################

def run_migrations_offline() -> None:
    context.configure(
        url=SYNC_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=IS_SQLITE,
    )
    with context.begin_transaction():
        context.run_migrations()

#####################################################################
# 3.  Online migrations over the async driver
#####################################################################

def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=IS_SQLITE,  # SQLite cannot ALTER constraints in place
    )
    with context.begin_transaction():
        context.run_migrations()

async def run_migrations_online() -> None:
    engine = create_async_engine(ASYNC_URL, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
