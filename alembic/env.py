"""Alembic environment for the OneFact ``facts`` table.

The database URL comes from ``DATABASE_URL_SYNC`` (psycopg2). Override it
for a single run with ``alembic -x db_url=postgresql://... upgrade head``.
Autogenerate compares types and server defaults so changes to the derived
search columns are picked up, and writes no file when nothing changed.
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context
from onefact.core.config import get_config
from onefact.core.database import Base
from onefact.core.logging import get_logger

# Registers the facts table with Base.metadata
from onefact.models import Fact

_MODELS = (Fact,)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = get_logger("alembic.env")

database_url = context.get_x_argument(as_dictionary=True).get("db_url")
config.set_main_option("sqlalchemy.url", database_url or get_config().database_url_sync)

target_metadata = Base.metadata


def skip_empty_revisions(migration_context, revision, directives) -> None:
    """Drop an autogenerated revision that has no operations."""
    if getattr(config.cmd_opts, "autogenerate", False) and directives[0].upgrade_ops.is_empty():
        directives[:] = []
        logger.info("No schema changes detected; no revision written")


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        process_revision_directives=skip_empty_revisions,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit migration SQL to stdout without connecting."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a single non-pooled connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
