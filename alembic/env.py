from __future__ import annotations

import logging
import os
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from alembic.operations.ops import MigrationScript
from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool

import content_ops.db.models  # noqa: F401
from content_ops.db.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")


def get_database_url() -> str:
    # `alembic -x db_url=...` wins over the environment.
    override = context.get_x_argument(as_dictionary=True).get("db_url")
    if override:
        return override

    env_path = Path(__file__).resolve().parents[1] / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)

    return os.environ.get("DATABASE_URL", "sqlite+pysqlite:///./content_ops.db")


def process_revision_directives(context, revision, directives) -> None:
    script = directives[0]
    if not isinstance(script, MigrationScript):
        return

    if config.cmd_opts is not None and getattr(config.cmd_opts, "autogenerate", False):
        if script.upgrade_ops is not None and script.upgrade_ops.is_empty():
            directives[:] = []
            logger.info("No schema changes detected; revision not written.")
            return

    # shared enum types are declared with postgresql.ENUM(create_type=False)
    script.imports.add("from sqlalchemy.dialects import postgresql")


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        process_revision_directives=process_revision_directives,
        **kwargs,
    )


def run_migrations_offline() -> None:
    url = get_database_url()
    _configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_database_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        future=True,
    )

    with connectable.connect() as connection:
        # sqlite cannot ALTER most constraints in place
        _configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite")

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
