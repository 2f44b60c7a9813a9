"""Forward projection, current-year snapshot, budget runway and period momentum."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal

from .distribution import compute_median
from .models import PeriodEntry, PeriodStats, PeriodType, Runway, YearSnapshot
from .periods import next_period, periods_per_year

# Number of trailing periods used for "recent" averages.
RECENT_WINDOW = 3

_ZERO = Decimal(0)


def _recent_average(
    entries: Sequence[PeriodEntry], totals: Mapping[str, Decimal]
) -> tuple[Decimal | None, list[PeriodEntry]]:
    recent = list(entries[-RECENT_WINDOW:]) if entries else []
    if not recent:
        return None, []
    total = sum((totals.get(e.key, _ZERO) for e in recent), _ZERO)
    return total / len(recent), recent


def build_projection(
    entries: Sequence[PeriodEntry],
    totals: Mapping[str, Decimal],
    period: PeriodType,
    horizon: int,
) -> dict[PeriodEntry, Decimal]:
    """Project the average of the last three observed periods ``horizon`` periods ahead.

    Returned in chronological order; empty when there is nothing observed.
    Stops early at the last period the calendar can represent.
    """

    if horizon <= 0:
        return {}
    average, _ = _recent_average(entries, totals)
    if average is None:
        return {}
    projected: dict[PeriodEntry, Decimal] = {}
    cursor = entries[-1]
    for _ in range(horizon):
        following = next_period(cursor, period)
        if following is None:
            break
        cursor = following
        projected[cursor] = average
    return projected


def _latest_year(year_totals: Mapping[int, Decimal]) -> int | None:
    return max(year_totals) if year_totals else None


def build_year_snapshot(
    year_totals: Mapping[int, Decimal],
    year_periods: Mapping[int, frozenset[str]],
    *,
    period: PeriodType,
    annual_budget: Decimal,
    expected_per_period: Decimal,
) -> YearSnapshot | None:
    """Year-to-date pace and projected year-end for the latest year with data."""

    year = _latest_year(year_totals)
    if year is None:
        return None
    year_total = year_totals[year]
    reported = len(year_periods.get(year, frozenset()))
    per_year = periods_per_year(period)
    expected_to_date = expected_per_period * reported
    pace_to_date = year_total / expected_to_date if expected_to_date > 0 else _ZERO
    projected: Decimal | None = None
    variance_vs_budget: Decimal | None = None
    if reported > 0:
        projected = (year_total / reported) * per_year
        variance_vs_budget = projected - annual_budget
    return YearSnapshot(
        year=year,
        periods_reported=reported,
        periods_per_year=per_year,
        year_to_date=year_total,
        expected_to_date=expected_to_date,
        pace_to_date=pace_to_date,
        projected_year_end=projected,
        variance_vs_budget=variance_vs_budget,
        remaining_budget=annual_budget - year_total,
    )


def build_runway(
    entries: Sequence[PeriodEntry],
    totals: Mapping[str, Decimal],
    year_totals: Mapping[int, Decimal],
    year_periods: Mapping[int, frozenset[str]],
    *,
    period: PeriodType,
    annual_budget: Decimal,
) -> Runway | None:
    """Spend needed per remaining period of the latest year to land on budget.

    The recent average only looks at periods inside the latest year.
    """

    year = _latest_year(year_totals)
    if year is None:
        return None
    year_total = year_totals[year]
    per_year = periods_per_year(period)
    reported = len(year_periods.get(year, frozenset()))
    remaining_periods = max(0, per_year - reported)
    remaining_budget = annual_budget - year_total
    required = remaining_budget / remaining_periods if remaining_periods > 0 else None

    recent_average, recent = _recent_average([e for e in entries if e.year == year], totals)
    delta: Decimal | None = None
    if required is not None and recent_average is not None:
        delta = required - recent_average

    return Runway(
        year=year,
        periods_reported=reported,
        periods_per_year=per_year,
        remaining_periods=remaining_periods,
        year_to_date=year_total,
        remaining_budget=remaining_budget,
        required_average=required,
        recent_average=recent_average,
        recent_periods=len(recent),
        delta_vs_recent=delta,
    )


def build_period_stats(
    entries: Sequence[PeriodEntry], totals: Mapping[str, Decimal]
) -> PeriodStats | None:
    """Spread of observed period totals and recent momentum."""

    if not entries:
        return None
    values = [totals.get(e.key, _ZERO) for e in entries]
    average = sum(values, _ZERO) / len(values)
    recent_average, recent = _recent_average(entries, totals)
    assert recent_average is not None  # entries is non-empty
    return PeriodStats(
        average=average,
        median=compute_median(values),
        minimum=min(values),
        maximum=max(values),
        recent_average=recent_average,
        recent_momentum=recent_average / average if average > 0 else None,
        recent_periods=tuple(e.key for e in recent),
    )


__all__ = [
    "RECENT_WINDOW",
    "build_period_stats",
    "build_projection",
    "build_runway",
    "build_year_snapshot",
]
