"""Centralized logging configuration for ``award_pacing`` and ``pacing_db``.

Two package roots emit logs: the analytics/CLI package (``"award_pacing"``)
and the shared database library (``"pacing_db"``). Both are configured here
so one ``--log-level`` controls the whole run.

- ``configure_logging(...)``: attach one shared ``StreamHandler`` to each
  package root. Called once by the CLI callback at process startup.
- ``get_logger(name)``: acquire a logger, making sure its package root has a
  ``NullHandler`` until ``configure_logging`` runs.

Library modules never attach handlers of their own.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_ROOTS = ("award_pacing", "pacing_db")
LEVEL_ENV_VAR = "AWARD_PACING_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured = False


def resolve_level(level: int | str | None) -> int:
    """Turn ``level`` (or ``$AWARD_PACING_LOG_LEVEL`` when ``None``) into a number.

    Unknown names fall back to ``INFO``.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.INFO


def _root_for(name: str) -> logging.Logger:
    return logging.getLogger(name.split(".", 1)[0])


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure every package root exactly once.

    ``stream`` defaults to the current ``sys.stderr`` so the report on stdout
    stays clean.
    """

    global _configured
    if _configured:
        return

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    for root_name in PACKAGE_ROOTS:
        root = logging.getLogger(root_name)
        for h in list(root.handlers):
            if isinstance(h, logging.NullHandler):
                root.removeHandler(h)
        root.setLevel(resolved)
        root.addHandler(handler)
        root.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``; its root gets a ``NullHandler`` if bare."""

    root = _root_for(name)
    if not _configured and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LEVEL_ENV_VAR", "PACKAGE_ROOTS", "configure_logging", "get_logger", "resolve_level"]
