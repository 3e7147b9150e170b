"""
Alembic migration environment for the async SQLModel schema.

The database URL comes from application settings, so migrations run
against whatever ``DATABASE_URL`` points at. SQLite URLs are migrated in
batch mode, since SQLite cannot alter most constraints in place.
"""

from asyncio import run as asyncio_run

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel

from alembic import context
from app.configs import settings
from app.monitoring import configure_logging, get_logger

# Registers the tables on SQLModel.metadata for autogenerate
from app.models import BlogDB, UserDB  # noqa: F401

configure_logging()
logger = get_logger("alembic.env")

target_metadata = SQLModel.metadata


def _configure(**kwargs: object) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=settings.is_sqlite,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Emits the SQL script without connecting to the database, for review
    or manual application.
    """
    _configure(
        url=settings.DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    """
    Execute migrations with the given database connection.

    Args:
        connection: SQLAlchemy database connection
    """
    _configure(connection=connection)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations against a live database through the async driver."""
    connectable = create_async_engine(settings.DATABASE_URL, poolclass=pool.NullPool)
    logger.info(f"Running migrations for {settings.ENVIRONMENT}")

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio_run(run_migrations_online())
