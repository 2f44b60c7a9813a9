"""Pacing analytics engine: records + config -> one immutable :class:`Summary`.

``build_summary`` is a pure function of its inputs. It expects records that
already passed :func:`award_pacing.filters.apply_filters`; use
:func:`award_pacing.api.summarize` to filter and summarize in one call.
"""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType

from .aggregate import aggregate
from .distribution import (
    build_award_stats,
    build_cadence,
    build_size_bands,
    build_top_awards,
    compute_concentration,
)
from .expectations import build_weighted_expectations, expected_per_period, weighted_totals
from .gaps import build_inactive_streaks, build_missing_periods
from .logging_setup import get_logger
from .models import Config, Record, Summary
from .projection import build_period_stats, build_projection, build_runway, build_year_snapshot
from .targets import build_breakdown, build_target_variances
from .variance import (
    build_cumulative,
    build_pace_flags,
    build_period_deltas,
    build_weighted_pace_flags,
    largest_swings,
)

_logger = get_logger("award_pacing.summary")


def build_summary(records: Iterable[Record], config: Config) -> Summary:
    """Aggregate ``records`` and run every pacing, risk and guidance pass."""

    agg = aggregate(records, config.period)
    entries = agg.ordered_entries()
    totals = agg.period_totals
    total_amount = agg.total_amount
    per_period = expected_per_period(config.annual_budget, config.period)

    weighted = build_weighted_expectations(entries, config)
    weighted_summary = weighted_totals(totals, weighted)
    deltas = build_period_deltas(entries, totals)
    increases, decreases = largest_swings(deltas)

    summary = Summary(
        total_records=len(agg.records),
        total_amount=total_amount,
        award_stats=build_award_stats(agg.amounts),
        period_type=config.period,
        annual_budget=config.annual_budget,
        expected_per_period=per_period,
        start_date=agg.start_date,
        end_date=agg.end_date,
        period_totals=totals,
        period_counts=agg.period_counts,
        period_entries=tuple(entries),
        missing_periods=tuple(build_missing_periods(entries, totals, config.period)),
        inactive_streaks=tuple(
            build_inactive_streaks(entries, totals, config.period, per_period)
        ),
        pace_flags=tuple(build_pace_flags(entries, totals, per_period)),
        weighted_pace_flags=tuple(build_weighted_pace_flags(entries, totals, weighted)),
        weighted_expectations=MappingProxyType(weighted) if weighted is not None else None,
        weighted_expected_total=weighted_summary[0] if weighted_summary else None,
        weighted_variance=weighted_summary[1] if weighted_summary else None,
        weighted_pace=weighted_summary[2] if weighted_summary else None,
        period_deltas=tuple(deltas),
        largest_increases=tuple(increases),
        largest_decreases=tuple(decreases),
        cumulative=tuple(build_cumulative(entries, totals, per_period)),
        period_stats=build_period_stats(entries, totals),
        year_totals=agg.year_totals,
        year_periods=agg.year_periods,
        category_totals=agg.category_totals,
        cohort_totals=agg.cohort_totals,
        top_categories=tuple(build_breakdown(agg.category_totals, total_amount)),
        top_cohorts=tuple(build_breakdown(agg.cohort_totals, total_amount)),
        category_targets=tuple(
            build_target_variances(config.category_targets, agg.category_totals, total_amount)
        ),
        cohort_targets=tuple(
            build_target_variances(config.cohort_targets, agg.cohort_totals, total_amount)
        ),
        projection=MappingProxyType(
            build_projection(entries, totals, config.period, config.projection_periods)
        ),
        year_snapshot=build_year_snapshot(
            agg.year_totals,
            agg.year_periods,
            period=config.period,
            annual_budget=config.annual_budget,
            expected_per_period=per_period,
        ),
        runway=build_runway(
            entries,
            totals,
            agg.year_totals,
            agg.year_periods,
            period=config.period,
            annual_budget=config.annual_budget,
        ),
        size_bands=tuple(build_size_bands(agg.amounts)),
        top_awards=tuple(build_top_awards(agg.records)),
        cadence=build_cadence(agg.records),
        concentration_top1=compute_concentration(agg.amounts, 1),
        concentration_top5=compute_concentration(agg.amounts, 5),
    )

    _logger.debug(
        "summary:built records=%d periods=%d missing=%d alerts=%d weighted_alerts=%d",
        summary.total_records,
        len(summary.period_entries),
        len(summary.missing_periods),
        len(summary.pace_flags),
        len(summary.weighted_pace_flags),
    )
    return summary


__all__ = ["build_summary"]
