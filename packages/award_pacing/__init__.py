"""Public interface for the ``award_pacing`` package.

This module exposes the package's API functions and public models/types as the
stable import surface. There is no runtime logic here, only symbol re-exports.
"""

from .api import summarize, summarize_csv
from .config import ConfigError, build_config
from .ingest import load_records_from_csv
from .models import (
    AwardStats,
    Breakdown,
    Cadence,
    Config,
    CumulativeEntry,
    InactiveStreak,
    PaceFlag,
    PeriodDelta,
    PeriodEntry,
    PeriodStats,
    PeriodType,
    Record,
    Runway,
    SizeBand,
    Summary,
    TargetConfig,
    TargetVariance,
    TopAward,
    YearSnapshot,
)
from .summary import build_summary

__all__ = [
    # API
    "build_config",
    "build_summary",
    "load_records_from_csv",
    "summarize",
    "summarize_csv",
    # Errors
    "ConfigError",
    # Models / types
    "AwardStats",
    "Breakdown",
    "Cadence",
    "Config",
    "CumulativeEntry",
    "InactiveStreak",
    "PaceFlag",
    "PeriodDelta",
    "PeriodEntry",
    "PeriodStats",
    "PeriodType",
    "Record",
    "Runway",
    "SizeBand",
    "Summary",
    "TargetConfig",
    "TargetVariance",
    "TopAward",
    "YearSnapshot",
]
