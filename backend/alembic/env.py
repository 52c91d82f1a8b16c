"""
Alembic Environment
===================

Migrations run against the same DATABASE_URL the API uses, through the
application's own engine builder. SQLite is migrated in batch mode since
it cannot ALTER most column properties in place.

    cd backend
    alembic upgrade head
    alembic revision --autogenerate -m "describe change"
"""

from logging.config import fileConfig

from alembic import context

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import create_db_engine

# Registers the models on Base.metadata for autogenerate
from app import models  # noqa: F401


config = context.config
settings = get_settings()

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure_options(dialect_name: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": dialect_name == "sqlite",
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of executing it."""
    context.configure(
        url=settings.DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options("sqlite" if settings.is_sqlite else ""),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_db_engine(settings)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, **_configure_options(connection.dialect.name))

            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
