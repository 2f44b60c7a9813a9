"""Data models for ``award_pacing``.

All models are frozen dataclasses. Money is carried as :class:`~decimal.Decimal`
end to end so that period, category, cohort and year totals agree exactly.
Optional numeric results (no percent, no weighted expectation, no runway) are
``None`` rather than ``0`` because the report renders the two differently.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import StrEnum
from pathlib import Path

# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class PeriodType(StrEnum):
    """Reporting period granularity."""

    MONTH = "month"
    QUARTER = "quarter"


@dataclass(frozen=True, slots=True)
class Record:
    """A single dated award as produced by CSV ingestion."""

    year: int
    month: int
    day: int
    amount: Decimal
    category: str
    cohort: str

    def calendar_date(self) -> date | None:
        """Return the record's calendar date, or ``None`` when it is not a real day."""

        try:
            return date(self.year, self.month, self.day)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class PeriodEntry:
    """A month or quarter bucket.

    Equality and hashing use ``key`` only, so entries synthesized by stepping
    (``periods.next_period``) match entries derived from records. Sort
    chronologically with ``key=attrgetter("anchor")``.
    """

    key: str
    anchor: date = field(compare=False)
    year: int = field(compare=False)


@dataclass(frozen=True, slots=True)
class TargetConfig:
    """A named share of total spend expected for a category or cohort."""

    name: str
    share: Decimal
    normalized: str


@dataclass(frozen=True, slots=True)
class Config:
    """Validated run configuration.

    ``export_path``, ``db_sync`` and ``db_schema`` are carried for the CLI and
    are ignored by the analytics engine.
    """

    annual_budget: Decimal
    period: PeriodType = PeriodType.MONTH
    period_weights: tuple[Decimal, ...] | None = None
    projection_periods: int = 0
    start_date: date | None = None
    end_date: date | None = None
    category_filters: tuple[str, ...] = ()
    cohort_filters: tuple[str, ...] = ()
    category_targets: tuple[TargetConfig, ...] = ()
    cohort_targets: tuple[TargetConfig, ...] = ()
    export_path: Path | None = None
    db_sync: bool = False
    db_schema: str | None = None

    def __post_init__(self) -> None:
        if self.annual_budget <= 0:
            raise ValueError("Config.annual_budget must be positive")
        if isinstance(self.projection_periods, bool) or self.projection_periods < 0:
            raise ValueError("Config.projection_periods must be a non-negative integer")
        if self.period_weights is not None:
            expected = 12 if self.period is PeriodType.MONTH else 4
            if len(self.period_weights) != expected:
                raise ValueError(
                    f"Config.period_weights must have {expected} values for {self.period.value}"
                )
            if any(w < 0 for w in self.period_weights):
                raise ValueError("Config.period_weights must be non-negative")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("Config.start_date must not be after end_date")


# ---------------------------------------------------------------------------
# Pacing results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PaceFlag:
    period: str
    actual: Decimal
    expected: Decimal
    variance: Decimal
    pace: Decimal


@dataclass(frozen=True, slots=True)
class PeriodDelta:
    previous: PeriodEntry
    current: PeriodEntry
    delta: Decimal
    # ``None`` when the previous period total is zero.
    percent: Decimal | None


@dataclass(frozen=True, slots=True)
class CumulativeEntry:
    entry: PeriodEntry
    actual: Decimal
    expected: Decimal
    variance: Decimal


@dataclass(frozen=True, slots=True)
class InactiveStreak:
    """A maximal run of consecutive periods with no spend."""

    start: PeriodEntry
    end: PeriodEntry
    length: int
    total_expected: Decimal
    total_actual: Decimal


@dataclass(frozen=True, slots=True)
class PeriodStats:
    average: Decimal
    median: Decimal
    minimum: Decimal
    maximum: Decimal
    recent_average: Decimal
    # Recent average relative to the overall average; ``None`` when the
    # overall average is zero.
    recent_momentum: Decimal | None
    recent_periods: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class YearSnapshot:
    year: int
    periods_reported: int
    periods_per_year: int
    year_to_date: Decimal
    expected_to_date: Decimal
    pace_to_date: Decimal
    projected_year_end: Decimal | None
    variance_vs_budget: Decimal | None
    remaining_budget: Decimal


@dataclass(frozen=True, slots=True)
class Runway:
    year: int
    periods_reported: int
    periods_per_year: int
    remaining_periods: int
    year_to_date: Decimal
    remaining_budget: Decimal
    required_average: Decimal | None
    recent_average: Decimal | None
    recent_periods: int
    delta_vs_recent: Decimal | None


# ---------------------------------------------------------------------------
# Award distribution results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AwardStats:
    count: int
    total: Decimal
    mean: Decimal
    median: Decimal
    std_dev: Decimal
    coefficient_of_variation: Decimal
    minimum: Decimal
    maximum: Decimal


@dataclass(frozen=True, slots=True)
class SizeBand:
    label: str
    minimum: Decimal
    maximum: Decimal | None
    count: int
    total: Decimal
    average: Decimal
    # Fraction of total spend (0-1).
    share: Decimal


@dataclass(frozen=True, slots=True)
class TopAward:
    date: date
    amount: Decimal
    category: str
    cohort: str


@dataclass(frozen=True, slots=True)
class Cadence:
    """Gaps, in days, between distinct calendar days that carried awards."""

    unique_days: int
    gap_count: int
    average_gap_days: float
    median_gap_days: float
    max_gap_days: int
    recent_gap_days: int


# ---------------------------------------------------------------------------
# Breakdown and target results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Breakdown:
    name: str
    amount: Decimal
    # Percent of total spend (0-100).
    share: Decimal


@dataclass(frozen=True, slots=True)
class TargetVariance:
    name: str
    target_share: Decimal
    actual_amount: Decimal
    expected_amount: Decimal
    variance: Decimal
    actual_share: Decimal


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Summary:
    """The complete pacing analysis for one (records, config) pair.

    Built once by :func:`award_pacing.summary.build_summary`. Mapping fields are
    read-only proxies; sequences are tuples in their reporting order.
    """

    total_records: int
    total_amount: Decimal
    award_stats: AwardStats
    period_type: PeriodType
    annual_budget: Decimal
    expected_per_period: Decimal
    start_date: date | None
    end_date: date | None

    period_totals: Mapping[str, Decimal]
    period_counts: Mapping[str, int]
    period_entries: tuple[PeriodEntry, ...]
    missing_periods: tuple[PeriodEntry, ...]
    inactive_streaks: tuple[InactiveStreak, ...]

    pace_flags: tuple[PaceFlag, ...]
    weighted_pace_flags: tuple[PaceFlag, ...]
    weighted_expectations: Mapping[str, Decimal] | None
    weighted_expected_total: Decimal | None
    weighted_variance: Decimal | None
    weighted_pace: Decimal | None

    period_deltas: tuple[PeriodDelta, ...]
    largest_increases: tuple[PeriodDelta, ...]
    largest_decreases: tuple[PeriodDelta, ...]
    cumulative: tuple[CumulativeEntry, ...]
    period_stats: PeriodStats | None

    year_totals: Mapping[int, Decimal]
    year_periods: Mapping[int, frozenset[str]]
    category_totals: Mapping[str, Decimal]
    cohort_totals: Mapping[str, Decimal]
    top_categories: tuple[Breakdown, ...]
    top_cohorts: tuple[Breakdown, ...]
    category_targets: tuple[TargetVariance, ...]
    cohort_targets: tuple[TargetVariance, ...]

    projection: Mapping[PeriodEntry, Decimal]
    year_snapshot: YearSnapshot | None
    runway: Runway | None

    size_bands: tuple[SizeBand, ...]
    top_awards: tuple[TopAward, ...]
    cadence: Cadence | None
    concentration_top1: Decimal
    concentration_top5: Decimal

    @property
    def expected_total(self) -> Decimal:
        return self.expected_per_period * len(self.period_entries)

    @property
    def variance(self) -> Decimal:
        return self.total_amount - self.expected_total

    def actual_for(self, entry: PeriodEntry) -> Decimal:
        return self.period_totals.get(entry.key, Decimal(0))


__all__ = [
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
