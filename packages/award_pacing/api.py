"""Public API orchestration for the ``award_pacing`` package.

This module is the stable import surface for callers that start from raw
records: it applies the configured filters and hands the survivors to the
analytics engine in :mod:`award_pacing.summary`.
"""

from __future__ import annotations

from collections.abc import Iterable
from os import PathLike

from .filters import apply_filters
from .ingest.utils import load_records_from_csv
from .logging_setup import get_logger
from .models import Config, Record, Summary
from .summary import build_summary

_logger = get_logger("award_pacing.api")


def summarize(records: Iterable[Record], config: Config) -> Summary | None:
    """Filter ``records`` by ``config`` and build the pacing summary.

    Returns ``None`` when no record survives the filters. The result does not
    depend on the order of ``records``.
    """

    filtered = apply_filters(records, config)
    if not filtered:
        _logger.info("summarize:empty_after_filters")
        return None
    return build_summary(filtered, config)


def summarize_csv(csv_path: str | PathLike[str], config: Config) -> Summary | None:
    """Load an award CSV and summarize it; ``None`` when nothing is left to report."""

    return summarize(load_records_from_csv(csv_path), config)


__all__ = ["summarize", "summarize_csv"]
