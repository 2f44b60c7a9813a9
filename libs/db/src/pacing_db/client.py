"""Centralized SQLAlchemy engine/session helpers for the pacing database.

Usage
-----
from pacing_db.client import session_scope

with session_scope(schema="award_pacing_monitor") as s:
    s.add(...)

The database URL comes from an explicit override, else ``DATABASE_URL``, else
is assembled from ``GS_DB_HOST``, ``GS_DB_PORT``, ``GS_DB_USER``,
``GS_DB_PASSWORD`` and ``GS_DB_NAME``. The schema comes from an explicit
override, else ``GS_DB_SCHEMA``, else ``award_pacing_monitor``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import URL, create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.schema import CreateSchema

from .models.pacing import DEFAULT_SCHEMA, Base

_logger = logging.getLogger("pacing_db.client")

_ENGINE: Engine | None = None
_SESSION_MAKER: sessionmaker[Session] | None = None
_DB_URL: str | None = None

_GS_DB_VARS = ("GS_DB_HOST", "GS_DB_PORT", "GS_DB_USER", "GS_DB_PASSWORD", "GS_DB_NAME")


def _url_from_gs_env() -> str | None:
    values = {name: os.getenv(name) for name in _GS_DB_VARS}
    if not any(values.values()):
        return None
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise RuntimeError("Missing database environment variables: " + ", ".join(missing))
    port_raw = values["GS_DB_PORT"] or ""
    try:
        port = int(port_raw)
    except ValueError as exc:
        raise RuntimeError(f"GS_DB_PORT is not a valid port: {port_raw!r}") from exc
    url = URL.create(
        "postgresql+psycopg2",
        username=values["GS_DB_USER"],
        password=values["GS_DB_PASSWORD"],
        host=values["GS_DB_HOST"],
        port=port,
        database=values["GS_DB_NAME"],
    )
    return url.render_as_string(hide_password=False)


def resolve_database_url(override: str | None = None) -> str:
    """Resolve the database URL or raise ``RuntimeError`` when none is configured."""

    url = override or os.getenv("DATABASE_URL") or _url_from_gs_env()
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set (nor GS_DB_HOST/GS_DB_PORT/GS_DB_USER/"
            "GS_DB_PASSWORD/GS_DB_NAME); cannot initialize database client"
        )
    return url


def resolve_schema(override: str | None = None) -> str:
    return override or os.getenv("GS_DB_SCHEMA") or DEFAULT_SCHEMA


def get_engine(*, database_url: str | None = None) -> Engine:
    """Return a shared SQLAlchemy engine, creating it on first use."""

    global _ENGINE, _SESSION_MAKER, _DB_URL
    url = resolve_database_url(database_url)
    if _ENGINE is None:
        engine = create_engine(url, pool_pre_ping=True)
        _SESSION_MAKER = sessionmaker(bind=engine, expire_on_commit=False, class_=Session)
        _ENGINE = engine
        _DB_URL = url
        _logger.info("db:engine_created dialect=%s", engine.dialect.name)
        return engine
    # Engine already initialized; guard against cross-environment misuse.
    if _DB_URL is not None and url != _DB_URL:
        raise RuntimeError(
            "get_engine() already initialized with a different database URL; "
            "restart the process or avoid passing a different URL"
        )
    return _ENGINE


def reset_engine() -> None:
    """Dispose the shared engine so the next call may bind a different URL."""

    global _ENGINE, _SESSION_MAKER, _DB_URL
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _SESSION_MAKER = None
    _DB_URL = None


def supports_schemas(bind: Engine | Connection) -> bool:
    return bind.dialect.name != "sqlite"


def get_session(*, database_url: str | None = None, schema: str | None = None) -> Session:
    """Return a new session bound to the shared engine.

    On dialects with schema support, unqualified tables are routed to
    ``schema`` through ``schema_translate_map``.
    """

    engine = get_engine(database_url=database_url)
    assert _SESSION_MAKER is not None  # bound by get_engine
    session = _SESSION_MAKER()
    if schema and supports_schemas(engine):
        session.connection(execution_options={"schema_translate_map": {None: schema}})
    return session


def ensure_schema(session: Session, schema: str | None = None) -> None:
    """Create the schema (where supported) and any missing pacing tables."""

    conn = session.connection()
    if schema and supports_schemas(conn):
        conn.execute(CreateSchema(schema, if_not_exists=True))
        _logger.debug("db:schema_ensured schema=%s", schema)
    Base.metadata.create_all(bind=conn, checkfirst=True)


@contextmanager
def session_scope(
    *, database_url: str | None = None, schema: str | None = None
) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = get_session(database_url=database_url, schema=schema)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "ensure_schema",
    "get_engine",
    "get_session",
    "reset_engine",
    "resolve_database_url",
    "resolve_schema",
    "session_scope",
    "supports_schemas",
]
