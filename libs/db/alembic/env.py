# ruff: noqa: I001
"""
Alembic configuration for the `pacing_db` library.

The database URL is resolved at runtime with the same rules as the
application (``DATABASE_URL``, else the ``GS_DB_*`` variables) and the target
schema from ``GS_DB_SCHEMA`` (default ``award_pacing_monitor``). Both offline
and online migrations are supported.
"""

from __future__ import annotations

import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.schema import CreateSchema
from dotenv import load_dotenv, find_dotenv

from pacing_db import metadata as target_metadata
from pacing_db.client import resolve_database_url, resolve_schema

# Alembic Config object, which provides access to the values within
# the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

# Load environment from a workspace-level .env if present.
#
# `find_dotenv(usecwd=True)` discovers `/repo/.env` both when Alembic runs
# from the repo root and from inside libs/db.
dotenv_path = find_dotenv(usecwd=True)
if dotenv_path:
    load_dotenv(dotenv_path=dotenv_path, override=False)

# Environment wins over the INI file.
db_url: str = resolve_database_url(config.get_main_option("sqlalchemy.url") or None)
schema: str = resolve_schema()

config.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))
# Migrations read the target schema from here.
config.attributes["pacing_schema"] = schema


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        version_table_schema=schema,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = db_url
    connectable = engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        if connection.dialect.name != "sqlite":
            connection.execute(CreateSchema(schema, if_not_exists=True))
            connection.commit()
        else:
            logger.info("SQLite target: ignoring schema %s", schema)
            config.attributes["pacing_schema"] = None
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            version_table_schema=schema if connection.dialect.name != "sqlite" else None,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
