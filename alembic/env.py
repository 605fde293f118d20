"""Alembic environment for the document store"""

import asyncio
import sys
from pathlib import Path
from logging.config import fileConfig
from sqlalchemy.engine import Connection
from alembic import context

sys.path.append(str(Path(__file__).parent.parent))

from app.config import settings
from app.database import Base, build_engine
from app.models.document import Document  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit the migration SQL for settings.DATABASE_URL without connecting."""
    context.configure(
        url=settings.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        # SQLite cannot ALTER columns in place
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Migrate through the same engine builder the app uses (asyncpg SSL handling included)."""
    engine = build_engine(settings.DATABASE_URL)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(do_run_migrations)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
