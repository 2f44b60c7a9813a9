"""Pytest configuration for test isolation.

The database client keeps a process-wide engine bound to the first URL it
sees, and resolves its URL from ``DATABASE_URL``/``GS_DB_*`` when no override
is passed. A developer's shell (or a local ``.env`` loaded by the CLI) would
otherwise leak into tests, so every test starts with those variables cleared
and the shared engine disposed. Logging configuration done by the CLI
callback is rolled back the same way.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

_DB_ENV_VARS = (
    "DATABASE_URL",
    "GS_DB_HOST",
    "GS_DB_PORT",
    "GS_DB_USER",
    "GS_DB_PASSWORD",
    "GS_DB_NAME",
    "GS_DB_SCHEMA",
    "AWARD_PACING_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_db_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear database settings and reset the shared engine around each test."""

    from pacing_db.client import reset_engine

    for name in _DB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_engine()
    yield
    reset_engine()


@pytest.fixture(autouse=True)
def _isolate_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Undo ``configure_logging`` after each test.

    The CLI callback attaches a handler bound to whatever ``sys.stderr`` is at
    the time, which under ``CliRunner`` is a stream closed after the invoke.
    """

    import logging

    from award_pacing import logging_setup

    monkeypatch.setattr(logging_setup, "_configured", False)
    roots = [logging.getLogger(name) for name in logging_setup.PACKAGE_ROOTS]
    saved = [(r, list(r.handlers), r.level, r.propagate) for r in roots]
    yield
    for root, handlers, level, propagate in saved:
        root.handlers[:] = handlers
        root.setLevel(level)
        root.propagate = propagate
