"""Single-pass aggregation of award records into period, label and year totals."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from operator import attrgetter
from types import MappingProxyType

from .models import PeriodEntry, PeriodType, Record
from .periods import period_key_for


@dataclass(frozen=True, slots=True)
class Aggregates:
    """Read-only totals produced by :func:`aggregate`.

    ``records`` and ``amounts`` keep input order (top-award ties and median use
    them); everything user-visible is sorted by the consumers.
    """

    records: tuple[Record, ...]
    amounts: tuple[Decimal, ...]
    period_totals: Mapping[str, Decimal]
    period_counts: Mapping[str, int]
    entries: Mapping[str, PeriodEntry]
    category_totals: Mapping[str, Decimal]
    cohort_totals: Mapping[str, Decimal]
    year_totals: Mapping[int, Decimal]
    year_periods: Mapping[int, frozenset[str]]
    start_date: date | None
    end_date: date | None

    @property
    def total_amount(self) -> Decimal:
        return sum(self.amounts, Decimal(0))

    def ordered_entries(self) -> list[PeriodEntry]:
        """Observed periods in chronological order."""

        return sorted(self.entries.values(), key=attrgetter("anchor"))


def aggregate(records: Iterable[Record], period: PeriodType) -> Aggregates:
    """Accumulate totals for every record with a valid calendar date."""

    kept: list[Record] = []
    period_totals: dict[str, Decimal] = defaultdict(Decimal)
    period_counts: dict[str, int] = defaultdict(int)
    entries: dict[str, PeriodEntry] = {}
    category_totals: dict[str, Decimal] = defaultdict(Decimal)
    cohort_totals: dict[str, Decimal] = defaultdict(Decimal)
    year_totals: dict[int, Decimal] = defaultdict(Decimal)
    year_periods: dict[int, set[str]] = defaultdict(set)
    start: date | None = None
    end: date | None = None

    for record in records:
        day = record.calendar_date()
        if day is None:
            continue
        kept.append(record)
        start = day if start is None or day < start else start
        end = day if end is None or day > end else end

        entry = period_key_for(record, period)
        period_totals[entry.key] += record.amount
        period_counts[entry.key] += 1
        entries[entry.key] = entry
        category_totals[record.category] += record.amount
        cohort_totals[record.cohort] += record.amount
        year_totals[entry.year] += record.amount
        year_periods[entry.year].add(entry.key)

    return Aggregates(
        records=tuple(kept),
        amounts=tuple(r.amount for r in kept),
        period_totals=MappingProxyType(dict(period_totals)),
        period_counts=MappingProxyType(dict(period_counts)),
        entries=MappingProxyType(entries),
        category_totals=MappingProxyType(dict(category_totals)),
        cohort_totals=MappingProxyType(dict(cohort_totals)),
        year_totals=MappingProxyType(dict(year_totals)),
        year_periods=MappingProxyType({y: frozenset(keys) for y, keys in year_periods.items()}),
        start_date=start,
        end_date=end,
    )


__all__ = ["Aggregates", "aggregate"]
