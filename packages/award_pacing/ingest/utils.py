"""Ingest utilities shared by the CLI and the public API.

Exposes a single helper that reads an award CSV from disk and returns parsed
:class:`~award_pacing.models.Record` items.
"""

from __future__ import annotations

import csv
from os import PathLike
from pathlib import Path

from ..logging_setup import get_logger
from ..models import Record
from .adapters.awards_csv import to_records

_logger = get_logger("award_pacing.ingest")


def load_records_from_csv(csv_path: str | PathLike[str]) -> list[Record]:
    """Read an award CSV and return the records that parsed cleanly.

    Raises ``FileNotFoundError``/``PermissionError`` for unreadable paths and
    ``csv.Error`` for structurally broken files; individual bad rows are
    skipped rather than raised.
    """

    p = Path(csv_path)
    with p.open(encoding="utf-8", newline="") as f:
        records = list(to_records(csv.reader(f)))
    _logger.info("ingest:loaded path=%s records=%d", p, len(records))
    return records


__all__ = ["load_records_from_csv"]
