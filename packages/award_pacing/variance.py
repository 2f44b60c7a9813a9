"""Pace alerts, period-over-period swings and cumulative pacing."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from itertools import pairwise

from .models import CumulativeEntry, PaceFlag, PeriodDelta, PeriodEntry

# Fixed pacing band: a period is flagged outside 80%-120% of expectation.
PACE_LOWER = Decimal("0.8")
PACE_UPPER = Decimal("1.2")

_ZERO = Decimal(0)


def pace_ratio(actual: Decimal, expected: Decimal) -> Decimal:
    return actual / expected if expected > 0 else _ZERO


def _flag(entry: PeriodEntry, actual: Decimal, expected: Decimal) -> PaceFlag | None:
    pace = pace_ratio(actual, expected)
    if PACE_LOWER <= pace <= PACE_UPPER:
        return None
    return PaceFlag(
        period=entry.key,
        actual=actual,
        expected=expected,
        variance=actual - expected,
        pace=pace,
    )


def _sorted_flags(flags: list[tuple[int, PaceFlag]]) -> list[PaceFlag]:
    # Largest absolute variance first; chronological position breaks ties.
    flags.sort(key=lambda item: (-abs(item[1].variance), item[0]))
    return [f for _, f in flags]


def build_pace_flags(
    entries: Sequence[PeriodEntry],
    totals: Mapping[str, Decimal],
    expected_per_period: Decimal,
) -> list[PaceFlag]:
    """Flag observed periods whose pace against the linear expectation is out of band."""

    flags: list[tuple[int, PaceFlag]] = []
    for pos, entry in enumerate(entries):
        flag = _flag(entry, totals.get(entry.key, _ZERO), expected_per_period)
        if flag is not None:
            flags.append((pos, flag))
    return _sorted_flags(flags)


def build_weighted_pace_flags(
    entries: Sequence[PeriodEntry],
    totals: Mapping[str, Decimal],
    expected_by_period: Mapping[str, Decimal] | None,
) -> list[PaceFlag]:
    """Same as :func:`build_pace_flags` against seasonality-weighted expectations.

    Periods without a weighted expectation are skipped.
    """

    if not expected_by_period:
        return []
    flags: list[tuple[int, PaceFlag]] = []
    for pos, entry in enumerate(entries):
        expected = expected_by_period.get(entry.key)
        if expected is None:
            continue
        flag = _flag(entry, totals.get(entry.key, _ZERO), expected)
        if flag is not None:
            flags.append((pos, flag))
    return _sorted_flags(flags)


def build_period_deltas(
    entries: Sequence[PeriodEntry], totals: Mapping[str, Decimal]
) -> list[PeriodDelta]:
    """Change between each consecutive pair of observed periods."""

    deltas: list[PeriodDelta] = []
    for previous, current in pairwise(entries):
        before = totals.get(previous.key, _ZERO)
        after = totals.get(current.key, _ZERO)
        delta = after - before
        deltas.append(
            PeriodDelta(
                previous=previous,
                current=current,
                delta=delta,
                percent=(delta / before) if before != 0 else None,
            )
        )
    return deltas


def largest_swings(
    deltas: Sequence[PeriodDelta], limit: int = 3
) -> tuple[list[PeriodDelta], list[PeriodDelta]]:
    """Return the ``limit`` largest increases and the ``limit`` largest decreases."""

    increases = sorted(
        (d for d in deltas if d.delta > 0), key=lambda d: (-d.delta, d.current.anchor)
    )
    decreases = sorted(
        (d for d in deltas if d.delta < 0), key=lambda d: (d.delta, d.current.anchor)
    )
    return increases[:limit], decreases[:limit]


def build_cumulative(
    entries: Sequence[PeriodEntry],
    totals: Mapping[str, Decimal],
    expected_per_period: Decimal,
) -> list[CumulativeEntry]:
    """Running actual vs. ``expected_per_period * n`` over observed periods."""

    running = _ZERO
    results: list[CumulativeEntry] = []
    for n, entry in enumerate(entries, start=1):
        running += totals.get(entry.key, _ZERO)
        expected = expected_per_period * n
        results.append(
            CumulativeEntry(
                entry=entry, actual=running, expected=expected, variance=running - expected
            )
        )
    return results


__all__ = [
    "PACE_LOWER",
    "PACE_UPPER",
    "build_cumulative",
    "build_pace_flags",
    "build_period_deltas",
    "build_weighted_pace_flags",
    "largest_swings",
    "pace_ratio",
]
