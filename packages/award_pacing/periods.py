"""Period model: keys, anchors and stepping for month/quarter buckets.

Every computation that walks a span of periods (missing periods, inactive
streaks, projection) steps with :func:`next_period` so the synthesized entries
agree with the entries derived from records.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from datetime import date
from decimal import Decimal

from .models import PeriodEntry, PeriodType, Record

_MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")
_QUARTER_KEY_RE = re.compile(r"^(\d{4})-Q(\d)$")


def periods_per_year(period: PeriodType) -> int:
    return 12 if period is PeriodType.MONTH else 4


def _entry_for(year: int, month: int, period: PeriodType) -> PeriodEntry:
    if period is PeriodType.MONTH:
        return PeriodEntry(key=f"{year:04d}-{month:02d}", anchor=date(year, month, 1), year=year)
    quarter = (month - 1) // 3 + 1
    first_month = (quarter - 1) * 3 + 1
    return PeriodEntry(key=f"{year}-Q{quarter}", anchor=date(year, first_month, 1), year=year)


def period_key_for(record: Record, period: PeriodType) -> PeriodEntry:
    """Return the period bucket a record falls into."""

    return _entry_for(record.year, record.month, period)


def next_period(entry: PeriodEntry, period: PeriodType) -> PeriodEntry | None:
    """Return the period immediately after ``entry`` (rolls over year ends).

    Returns ``None`` when the next period would start after ``date.max``.
    """

    step = 1 if period is PeriodType.MONTH else 3
    months = entry.anchor.year * 12 + (entry.anchor.month - 1) + step
    year, month0 = divmod(months, 12)
    if year > date.max.year:
        return None
    synthetic = Record(
        year=year, month=month0 + 1, day=1, amount=Decimal(0), category="", cohort=""
    )
    return period_key_for(synthetic, period)


def iter_span(first: PeriodEntry, last: PeriodEntry, period: PeriodType) -> Iterator[PeriodEntry]:
    """Yield every period from ``first`` to ``last`` inclusive, in order."""

    cursor: PeriodEntry | None = first
    while cursor is not None and cursor.anchor <= last.anchor:
        yield cursor
        cursor = next_period(cursor, period)


def weight_index(entry: PeriodEntry, period: PeriodType) -> int | None:
    """Return the 0-based month or quarter index of ``entry``.

    Returns ``None`` for keys that do not parse for the given granularity; callers
    skip such entries.
    """

    if period is PeriodType.MONTH:
        m = _MONTH_KEY_RE.fullmatch(entry.key)
        if m is None:
            return None
        month = int(m.group(2))
        return month - 1 if 1 <= month <= 12 else None
    m = _QUARTER_KEY_RE.fullmatch(entry.key)
    if m is None:
        return None
    quarter = int(m.group(2))
    return quarter - 1 if 1 <= quarter <= 4 else None


__all__ = [
    "iter_span",
    "next_period",
    "period_key_for",
    "periods_per_year",
    "weight_index",
]
