"""Linear and seasonality-weighted expected spend per period."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal

from .models import Config, PeriodEntry, PeriodType
from .periods import periods_per_year, weight_index


def expected_per_period(annual_budget: Decimal, period: PeriodType) -> Decimal:
    return annual_budget / periods_per_year(period)


def build_weighted_expectations(
    entries: Iterable[PeriodEntry], config: Config
) -> dict[str, Decimal] | None:
    """Map period key -> ``annual_budget * weight`` for the entry's period index.

    Returns ``None`` when no weights are configured. Entries whose index cannot
    be resolved are left out: a missing key means "no weighted expectation",
    not "expect zero". Weights are used as given (normalized upstream).
    """

    weights = config.period_weights
    if weights is None:
        return None
    expected: dict[str, Decimal] = {}
    for entry in entries:
        index = weight_index(entry, config.period)
        if index is None or index >= len(weights):
            continue
        expected[entry.key] = config.annual_budget * weights[index]
    return expected


def weighted_totals(
    totals: Mapping[str, Decimal], expected_by_period: Mapping[str, Decimal] | None
) -> tuple[Decimal, Decimal, Decimal] | None:
    """Return ``(expected_total, variance, pace)`` over periods with a weighted expectation."""

    if expected_by_period is None:
        return None
    expected_total = sum(expected_by_period.values(), Decimal(0))
    actual_total = sum(
        (totals.get(key, Decimal(0)) for key in expected_by_period), Decimal(0)
    )
    pace = actual_total / expected_total if expected_total > 0 else Decimal(0)
    return expected_total, actual_total - expected_total, pace


__all__ = ["build_weighted_expectations", "expected_per_period", "weighted_totals"]
