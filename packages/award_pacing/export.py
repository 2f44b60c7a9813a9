"""JSON export of a :class:`~award_pacing.models.Summary`.

The payload is described by strict pydantic models so the on-disk shape is
validated before it is written. Keys are camelCase; optional sections are
omitted when absent. Money and ratios are emitted as JSON numbers.

Atomicity: writes target ``<path>.tmp`` first and then ``os.replace`` into
place.
"""

from __future__ import annotations

import contextlib
import json
import os
from datetime import date, datetime
from decimal import Decimal
from os import PathLike
from pathlib import Path

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .logging_setup import get_logger
from .models import Config, PaceFlag, PeriodDelta, Summary, TargetVariance

_logger = get_logger("award_pacing.export")


class _ExportModel(BaseModel):
    model_config = ConfigDict(
        strict=True, extra="forbid", alias_generator=to_camel, populate_by_name=True
    )


class ExportDateRange(_ExportModel):
    start: str | None
    end: str | None


class ExportFilters(_ExportModel):
    start_date: str | None = None
    end_date: str | None = None
    categories: list[str]
    cohorts: list[str]


class ExportTotals(_ExportModel):
    records: int
    actual: float
    expected: float
    variance: float
    average_award: float
    median_award: float


class ExportAwardStats(_ExportModel):
    count: int
    total: float
    mean: float
    median: float
    std_dev: float
    coefficient_of_variation: float
    minimum: float
    maximum: float


class ExportConcentration(_ExportModel):
    top1: float
    top5: float


class ExportSizeBand(_ExportModel):
    label: str
    minimum: float
    maximum: float | None = None
    count: int
    total: float
    average: float
    share: float


class ExportTopAward(_ExportModel):
    date: str
    amount: float
    category: str
    cohort: str


class ExportCadence(_ExportModel):
    unique_days: int
    gap_count: int
    average_gap_days: float
    median_gap_days: float
    max_gap_days: int
    recent_gap_days: int


class ExportPeriod(_ExportModel):
    key: str
    actual: float
    expected: float
    pace: float
    record_count: int
    average_award: float
    cumulative_actual: float
    cumulative_expected: float
    cumulative_variance: float


class ExportInactiveStreak(_ExportModel):
    start: str
    end: str
    length: int
    total_expected: float
    total_actual: float


class ExportPaceAlert(_ExportModel):
    period: str
    actual: float
    expected: float
    variance: float
    pace: float


class ExportSeasonality(_ExportModel):
    expected_total: float
    variance: float
    pace: float
    expectations: dict[str, float]


class ExportSwing(_ExportModel):
    previous: str
    current: str
    delta: float
    percent: float | None = None


class ExportPeriodStats(_ExportModel):
    average: float
    median: float
    minimum: float
    maximum: float
    recent_average: float
    recent_momentum: float | None = None
    recent_periods: list[str]


class ExportProjection(_ExportModel):
    period: str
    amount: float


class ExportYearSnapshot(_ExportModel):
    year: int
    periods_reported: int
    periods_per_year: int
    year_to_date: float
    expected_to_date: float
    pace_to_date: float
    projected_year_end: float | None = None
    variance_vs_budget: float | None = None
    remaining_budget: float


class ExportRunway(_ExportModel):
    year: int
    periods_reported: int
    periods_per_year: int
    remaining_periods: int
    year_to_date: float
    remaining_budget: float
    required_average: float | None = None
    recent_average: float | None = None
    recent_periods: int
    delta_vs_recent: float | None = None


class ExportBreakdown(_ExportModel):
    name: str
    amount: float
    share: float


class ExportTargetVariance(_ExportModel):
    name: str
    target_share: float
    actual_amount: float
    expected_amount: float
    variance: float
    actual_share: float


class ExportPayload(_ExportModel):
    """Top-level schema for an exported pacing report."""

    generated_at: str
    period_type: str
    annual_budget: float
    date_range: ExportDateRange
    filters: ExportFilters
    totals: ExportTotals
    award_stats: ExportAwardStats
    concentration: ExportConcentration
    size_bands: list[ExportSizeBand]
    top_awards: list[ExportTopAward]
    cadence: ExportCadence | None = None
    periods: list[ExportPeriod]
    missing_periods: list[str]
    inactive_streaks: list[ExportInactiveStreak]
    pace_alerts: list[ExportPaceAlert]
    weighted_pace_alerts: list[ExportPaceAlert]
    seasonality: ExportSeasonality | None = None
    largest_increases: list[ExportSwing]
    largest_decreases: list[ExportSwing]
    period_stats: ExportPeriodStats | None = None
    projection: list[ExportProjection]
    year_snapshot: ExportYearSnapshot | None = None
    runway: ExportRunway | None = None
    top_categories: list[ExportBreakdown]
    top_cohorts: list[ExportBreakdown]
    category_targets: list[ExportTargetVariance] | None = None
    cohort_targets: list[ExportTargetVariance] | None = None


def _num(value: Decimal) -> float:
    return float(value)


def _opt(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _alert(flag: PaceFlag) -> ExportPaceAlert:
    return ExportPaceAlert(
        period=flag.period,
        actual=_num(flag.actual),
        expected=_num(flag.expected),
        variance=_num(flag.variance),
        pace=_num(flag.pace),
    )


def _swing(delta: PeriodDelta) -> ExportSwing:
    return ExportSwing(
        previous=delta.previous.key,
        current=delta.current.key,
        delta=_num(delta.delta),
        percent=_opt(delta.percent),
    )


def _targets(rows: tuple[TargetVariance, ...]) -> list[ExportTargetVariance] | None:
    if not rows:
        return None
    return [
        ExportTargetVariance(
            name=t.name,
            target_share=_num(t.target_share),
            actual_amount=_num(t.actual_amount),
            expected_amount=_num(t.expected_amount),
            variance=_num(t.variance),
            actual_share=_num(t.actual_share),
        )
        for t in rows
    ]


def _periods(summary: Summary) -> list[ExportPeriod]:
    rows: list[ExportPeriod] = []
    expected = summary.expected_per_period
    for entry, cumulative in zip(summary.period_entries, summary.cumulative, strict=True):
        actual = summary.actual_for(entry)
        count = summary.period_counts.get(entry.key, 0)
        rows.append(
            ExportPeriod(
                key=entry.key,
                actual=_num(actual),
                expected=_num(expected),
                pace=_num(actual / expected) if expected > 0 else 0.0,
                record_count=count,
                average_award=_num(actual / count) if count > 0 else 0.0,
                cumulative_actual=_num(cumulative.actual),
                cumulative_expected=_num(cumulative.expected),
                cumulative_variance=_num(cumulative.variance),
            )
        )
    return rows


def build_export_payload(
    summary: Summary, config: Config, generated_at: datetime
) -> ExportPayload:
    """Project ``summary`` (and the filters in ``config``) onto the export schema."""

    stats = summary.award_stats
    seasonality = None
    if summary.weighted_expectations is not None and summary.weighted_expected_total is not None:
        seasonality = ExportSeasonality(
            expected_total=_num(summary.weighted_expected_total),
            variance=_num(summary.weighted_variance or Decimal(0)),
            pace=_num(summary.weighted_pace or Decimal(0)),
            expectations={k: _num(v) for k, v in summary.weighted_expectations.items()},
        )

    period_stats = None
    if summary.period_stats is not None:
        ps = summary.period_stats
        period_stats = ExportPeriodStats(
            average=_num(ps.average),
            median=_num(ps.median),
            minimum=_num(ps.minimum),
            maximum=_num(ps.maximum),
            recent_average=_num(ps.recent_average),
            recent_momentum=_opt(ps.recent_momentum),
            recent_periods=list(ps.recent_periods),
        )

    year_snapshot = None
    if summary.year_snapshot is not None:
        ys = summary.year_snapshot
        year_snapshot = ExportYearSnapshot(
            year=ys.year,
            periods_reported=ys.periods_reported,
            periods_per_year=ys.periods_per_year,
            year_to_date=_num(ys.year_to_date),
            expected_to_date=_num(ys.expected_to_date),
            pace_to_date=_num(ys.pace_to_date),
            projected_year_end=_opt(ys.projected_year_end),
            variance_vs_budget=_opt(ys.variance_vs_budget),
            remaining_budget=_num(ys.remaining_budget),
        )

    runway = None
    if summary.runway is not None:
        rw = summary.runway
        runway = ExportRunway(
            year=rw.year,
            periods_reported=rw.periods_reported,
            periods_per_year=rw.periods_per_year,
            remaining_periods=rw.remaining_periods,
            year_to_date=_num(rw.year_to_date),
            remaining_budget=_num(rw.remaining_budget),
            required_average=_opt(rw.required_average),
            recent_average=_opt(rw.recent_average),
            recent_periods=rw.recent_periods,
            delta_vs_recent=_opt(rw.delta_vs_recent),
        )

    cadence = None
    if summary.cadence is not None:
        cd = summary.cadence
        cadence = ExportCadence(
            unique_days=cd.unique_days,
            gap_count=cd.gap_count,
            average_gap_days=float(cd.average_gap_days),
            median_gap_days=float(cd.median_gap_days),
            max_gap_days=cd.max_gap_days,
            recent_gap_days=cd.recent_gap_days,
        )

    return ExportPayload(
        generated_at=generated_at.isoformat(),
        period_type=summary.period_type.value,
        annual_budget=_num(config.annual_budget),
        date_range=ExportDateRange(start=_iso(summary.start_date), end=_iso(summary.end_date)),
        filters=ExportFilters(
            start_date=_iso(config.start_date),
            end_date=_iso(config.end_date),
            categories=list(config.category_filters),
            cohorts=list(config.cohort_filters),
        ),
        totals=ExportTotals(
            records=summary.total_records,
            actual=_num(summary.total_amount),
            expected=_num(summary.expected_total),
            variance=_num(summary.variance),
            average_award=_num(stats.mean),
            median_award=_num(stats.median),
        ),
        award_stats=ExportAwardStats(
            count=stats.count,
            total=_num(stats.total),
            mean=_num(stats.mean),
            median=_num(stats.median),
            std_dev=_num(stats.std_dev),
            coefficient_of_variation=_num(stats.coefficient_of_variation),
            minimum=_num(stats.minimum),
            maximum=_num(stats.maximum),
        ),
        concentration=ExportConcentration(
            top1=_num(summary.concentration_top1), top5=_num(summary.concentration_top5)
        ),
        size_bands=[
            ExportSizeBand(
                label=b.label,
                minimum=_num(b.minimum),
                maximum=_opt(b.maximum),
                count=b.count,
                total=_num(b.total),
                average=_num(b.average),
                share=_num(b.share),
            )
            for b in summary.size_bands
        ],
        top_awards=[
            ExportTopAward(
                date=a.date.isoformat(), amount=_num(a.amount), category=a.category, cohort=a.cohort
            )
            for a in summary.top_awards
        ],
        cadence=cadence,
        periods=_periods(summary),
        missing_periods=[e.key for e in summary.missing_periods],
        inactive_streaks=[
            ExportInactiveStreak(
                start=s.start.key,
                end=s.end.key,
                length=s.length,
                total_expected=_num(s.total_expected),
                total_actual=_num(s.total_actual),
            )
            for s in summary.inactive_streaks
        ],
        pace_alerts=[_alert(f) for f in summary.pace_flags],
        weighted_pace_alerts=[_alert(f) for f in summary.weighted_pace_flags],
        seasonality=seasonality,
        largest_increases=[_swing(d) for d in summary.largest_increases],
        largest_decreases=[_swing(d) for d in summary.largest_decreases],
        period_stats=period_stats,
        projection=[
            ExportProjection(period=entry.key, amount=_num(amount))
            for entry, amount in summary.projection.items()
        ],
        year_snapshot=year_snapshot,
        runway=runway,
        top_categories=[
            ExportBreakdown(name=b.name, amount=_num(b.amount), share=_num(b.share))
            for b in summary.top_categories
        ],
        top_cohorts=[
            ExportBreakdown(name=b.name, amount=_num(b.amount), share=_num(b.share))
            for b in summary.top_cohorts
        ],
        category_targets=_targets(summary.category_targets),
        cohort_targets=_targets(summary.cohort_targets),
    )


def dump_payload(payload: ExportPayload) -> str:
    """Serialize ``payload`` as pretty-printed JSON with sorted keys."""

    data = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def write_export(payload: ExportPayload, path: str | PathLike[str]) -> Path:
    """Write ``payload`` to ``path`` atomically and return the resolved path."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(target.suffix + ".tmp")
    try:
        tmp.write_text(dump_payload(payload), encoding="utf-8")
        os.replace(tmp, target)
    except Exception:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        raise
    _logger.info("export:written path=%s", target)
    return target


__all__ = [
    "ExportPayload",
    "build_export_payload",
    "dump_payload",
    "write_export",
]
