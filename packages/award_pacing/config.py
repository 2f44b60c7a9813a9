"""Parsing and validation of command-line values into a :class:`Config`.

Parsers raise :class:`ConfigError` naming the offending flag; the CLI turns
those into a one-line error and a non-zero exit status.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from .filters import normalize_label
from .models import Config, PeriodType, TargetConfig

# Slack allowed on the sum of target shares before rejecting a target list.
TARGET_SHARE_TOLERANCE = Decimal("1.001")


class ConfigError(ValueError):
    """A command-line value failed validation."""

    def __init__(self, flag: str, reason: str = "Invalid value") -> None:
        super().__init__(f"{reason} for {flag}")
        self.flag = flag


def parse_decimal(raw: str, flag: str) -> Decimal:
    try:
        value = Decimal(raw.strip())
    except (InvalidOperation, AttributeError) as exc:
        raise ConfigError(flag) from exc
    if not value.is_finite():
        raise ConfigError(flag)
    return value


def parse_date(raw: str, flag: str) -> date:
    """Parse ``YYYY-MM-DD``."""

    parts = raw.strip().split("-")
    try:
        if len(parts) != 3:
            raise ValueError(raw)
        return date(int(parts[0]), int(parts[1]), int(parts[2]))
    except ValueError as exc:
        raise ConfigError(flag) from exc


def parse_period(raw: str, flag: str = "--period") -> PeriodType:
    try:
        return PeriodType(raw.strip().lower())
    except ValueError as exc:
        raise ConfigError(flag) from exc


def parse_filter_list(raw: str | None) -> tuple[str, ...]:
    """Split a comma list into lowercased, non-empty names."""

    if not raw:
        return ()
    names = (normalize_label(part) for part in raw.split(","))
    return tuple(n for n in names if n)


def parse_target_list(raw: str | None, flag: str) -> tuple[TargetConfig, ...]:
    """Parse ``name=share,...``.

    Shares above 1 are read as percentages (``40`` means ``0.40``). Negative
    shares and totals above :data:`TARGET_SHARE_TOLERANCE` are rejected.
    """

    if not raw:
        return ()
    targets: list[TargetConfig] = []
    total = Decimal(0)
    for entry in raw.split(","):
        name, sep, value = entry.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ConfigError(flag)
        share = parse_decimal(value, flag)
        if share > 1:
            share = share / 100
        if share < 0:
            raise ConfigError(flag)
        total += share
        targets.append(TargetConfig(name=name, share=share, normalized=normalize_label(name)))
    if total > TARGET_SHARE_TOLERANCE:
        raise ConfigError(flag, "Target shares exceed 100%")
    return tuple(targets)


def normalize_weights(raw: Sequence[Decimal], flag: str) -> tuple[Decimal, ...]:
    """Scale weights so they sum to 1."""

    if any(w < 0 for w in raw):
        raise ConfigError(flag)
    total = sum(raw, Decimal(0))
    if total <= 0:
        raise ConfigError(flag, "Weights must not all be zero")
    return tuple(w / total for w in raw)


def parse_period_weights(
    raw: str | None, period: PeriodType, flag: str = "--period-weights"
) -> tuple[Decimal, ...] | None:
    """Parse a comma list of 12 (month) or 4 (quarter) seasonality weights."""

    if not raw:
        return None
    values = [parse_decimal(part, flag) for part in raw.split(",") if part.strip()]
    expected = 12 if period is PeriodType.MONTH else 4
    if len(values) != expected:
        raise ConfigError(flag, f"Expected {expected} weights")
    return normalize_weights(values, flag)


def build_config(
    *,
    budget: str,
    period: str = "month",
    period_weights: str | None = None,
    projection_periods: int = 0,
    start_date: str | None = None,
    end_date: str | None = None,
    categories: str | None = None,
    cohorts: str | None = None,
    category_targets: str | None = None,
    cohort_targets: str | None = None,
    export_path: Path | None = None,
    db_sync: bool = False,
    db_schema: str | None = None,
) -> Config:
    """Validate raw CLI values and return an immutable :class:`Config`."""

    annual_budget = parse_decimal(budget, "--budget")
    if annual_budget <= 0:
        raise ConfigError("--budget", "Budget must be positive")
    period_type = parse_period(period)
    start = parse_date(start_date, "--start-date") if start_date else None
    end = parse_date(end_date, "--end-date") if end_date else None
    if start and end and start > end:
        raise ConfigError("--start-date", "Start date is after end date")

    return Config(
        annual_budget=annual_budget,
        period=period_type,
        period_weights=parse_period_weights(period_weights, period_type),
        projection_periods=max(0, projection_periods),
        start_date=start,
        end_date=end,
        category_filters=parse_filter_list(categories),
        cohort_filters=parse_filter_list(cohorts),
        category_targets=parse_target_list(category_targets, "--category-targets"),
        cohort_targets=parse_target_list(cohort_targets, "--cohort-targets"),
        export_path=export_path,
        db_sync=db_sync,
        db_schema=db_schema,
    )


__all__ = [
    "TARGET_SHARE_TOLERANCE",
    "ConfigError",
    "build_config",
    "normalize_weights",
    "parse_date",
    "parse_decimal",
    "parse_filter_list",
    "parse_period",
    "parse_period_weights",
    "parse_target_list",
]
