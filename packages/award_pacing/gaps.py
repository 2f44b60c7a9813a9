"""Missing-period and inactive-streak reconstruction.

Both walks start at the earliest observed period and step with
:func:`award_pacing.periods.iter_span` to the latest one, so periods with no
records are synthesized rather than skipped.

The two computations differ on purpose: a period present in ``totals`` with a
zero total is *not* missing, but it *is* inactive.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal

from .models import InactiveStreak, PeriodEntry, PeriodType
from .periods import iter_span


def build_missing_periods(
    entries: Sequence[PeriodEntry],
    totals: Mapping[str, Decimal],
    period: PeriodType,
) -> list[PeriodEntry]:
    """Return periods in the observed span that have no entry in ``totals``.

    ``entries`` must be chronological. Zero or one observed period yields ``[]``.
    """

    if len(entries) < 2:
        return []
    return [p for p in iter_span(entries[0], entries[-1], period) if p.key not in totals]


def build_inactive_streaks(
    entries: Sequence[PeriodEntry],
    totals: Mapping[str, Decimal],
    period: PeriodType,
    expected_per_period: Decimal,
) -> list[InactiveStreak]:
    """Return maximal runs of zero-spend periods, longest first.

    Ties are broken by the earlier start.
    """

    if not entries:
        return []

    runs: list[list[PeriodEntry]] = []
    current: list[PeriodEntry] = []
    for p in iter_span(entries[0], entries[-1], period):
        if totals.get(p.key, Decimal(0)) == 0:
            current.append(p)
        elif current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)

    streaks = [
        InactiveStreak(
            start=run[0],
            end=run[-1],
            length=len(run),
            total_expected=expected_per_period * len(run),
            total_actual=sum((totals.get(p.key, Decimal(0)) for p in run), Decimal(0)),
        )
        for run in runs
    ]
    streaks.sort(key=lambda s: (-s.length, s.start.anchor))
    return streaks


__all__ = ["build_inactive_streaks", "build_missing_periods"]
