"""Alembic migration environment"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from tbs.core.database import Base
from tbs import models  # noqa: F401

config = context.config

target_metadata = Base.metadata


def _configure_from_settings() -> None:
    """Fill sqlalchemy.url from application settings when invoked from the CLI"""
    if config.get_main_option("sqlalchemy.url"):
        return
    from tbs.config import get_settings
    config.set_main_option("sqlalchemy.url", get_settings().DATABASE_URL.replace("%", "%%"))


def run_migrations_offline() -> None:
    _configure_from_settings()
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    shared_connection = config.attributes.get("connection")
    if shared_connection is not None:
        # Called from tbs.core.database.run_migrations at application startup
        _run_with_connection(shared_connection)
        return

    if config.config_file_name is not None:
        fileConfig(config.config_file_name)

    _configure_from_settings()
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _run_with_connection(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
