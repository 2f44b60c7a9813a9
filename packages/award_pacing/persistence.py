# ruff: noqa: I001
"""Persistence integration for award_pacing.

Writes a point-in-time snapshot of a :class:`~award_pacing.models.Summary` to
the shared database owned by ``libs/db``. Relies on the SQLAlchemy ORM models
in ``pacing_db.models.pacing`` and a session provided by ``pacing_db.client``.

Scope:
- One ``snapshots`` row per run, with totals and the applied filters.
- Child rows for periods, missing periods, linear and weighted pace alerts,
  projections, inactive streaks, category/cohort breakdowns and targets.

Nothing is committed here; callers wrap the call in ``session_scope`` so all
rows for a snapshot land together or not at all.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from pacing_db.models.pacing import (
    PacingAlert,
    PacingBreakdown,
    PacingInactiveStreak,
    PacingMissingPeriod,
    PacingPeriod,
    PacingProjection,
    PacingSnapshot,
    PacingTarget,
)
from .logging_setup import get_logger
from .models import Breakdown, Config, PaceFlag, Summary, TargetVariance

_logger = get_logger("award_pacing.persistence")

_CENT = Decimal("0.01")
_BASIS = Decimal("0.0001")


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def _ratio(value: Decimal) -> Decimal:
    return value.quantize(_BASIS, rounding=ROUND_HALF_UP)


def _filters_json(config: Config) -> dict[str, object]:
    return {
        "start_date": config.start_date.isoformat() if config.start_date else None,
        "end_date": config.end_date.isoformat() if config.end_date else None,
        "categories": list(config.category_filters),
        "cohorts": list(config.cohort_filters),
    }


def _alert_rows(
    snapshot_id: uuid.UUID, flags: Iterable[PaceFlag], alert_type: str
) -> list[PacingAlert]:
    return [
        PacingAlert(
            snapshot_id=snapshot_id,
            alert_type=alert_type,
            period_key=f.period,
            actual=_money(f.actual),
            expected=_money(f.expected),
            variance=_money(f.variance),
            pace=_ratio(f.pace),
        )
        for f in flags
    ]


def _breakdown_rows(
    snapshot_id: uuid.UUID, rows: Iterable[Breakdown], breakdown_type: str
) -> list[PacingBreakdown]:
    return [
        PacingBreakdown(
            snapshot_id=snapshot_id,
            breakdown_type=breakdown_type,
            name=b.name,
            amount=_money(b.amount),
            share=_ratio(b.share),
        )
        for b in rows
    ]


def _target_rows(
    snapshot_id: uuid.UUID, rows: Iterable[TargetVariance], target_type: str
) -> list[PacingTarget]:
    return [
        PacingTarget(
            snapshot_id=snapshot_id,
            target_type=target_type,
            name=t.name,
            target_share=_ratio(t.target_share),
            actual_amount=_money(t.actual_amount),
            expected_amount=_money(t.expected_amount),
            variance=_money(t.variance),
            actual_share=_ratio(t.actual_share),
        )
        for t in rows
    ]


def _period_rows(snapshot_id: uuid.UUID, summary: Summary) -> list[PacingPeriod]:
    expected = summary.expected_per_period
    rows: list[PacingPeriod] = []
    for entry, cumulative in zip(summary.period_entries, summary.cumulative, strict=True):
        actual = summary.actual_for(entry)
        count = summary.period_counts.get(entry.key, 0)
        rows.append(
            PacingPeriod(
                snapshot_id=snapshot_id,
                period_key=entry.key,
                actual=_money(actual),
                expected=_money(expected),
                pace=_ratio(actual / expected) if expected > 0 else _ratio(Decimal(0)),
                record_count=count,
                average_award=_money(actual / count) if count > 0 else _money(Decimal(0)),
                cumulative_actual=_money(cumulative.actual),
                cumulative_expected=_money(cumulative.expected),
                cumulative_variance=_money(cumulative.variance),
            )
        )
    return rows


def sync_snapshot(
    session: Session,
    summary: Summary,
    config: Config,
    *,
    generated_at: datetime | None = None,
) -> str:
    """Insert one snapshot of ``summary`` and return its id as a string.

    Raises ``ValueError`` when the summary has no date range (no records).
    Database errors propagate to the caller, whose transaction scope rolls
    the whole snapshot back.
    """

    if summary.start_date is None or summary.end_date is None:
        raise ValueError("cannot persist a summary without records")

    snapshot_id = uuid.uuid4()
    stats = summary.award_stats
    session.add(
        PacingSnapshot(
            snapshot_id=snapshot_id,
            generated_at=generated_at or datetime.now(UTC),
            period_type=summary.period_type.value,
            annual_budget=_money(config.annual_budget),
            start_date=summary.start_date,
            end_date=summary.end_date,
            total_records=summary.total_records,
            total_amount=_money(summary.total_amount),
            expected_total=_money(summary.expected_total),
            variance=_money(summary.variance),
            average_award=_money(stats.mean),
            median_award=_money(stats.median),
            filters=_filters_json(config),
        )
    )
    # Parent row first so child foreign keys resolve.
    session.flush()

    children: list[object] = []
    children.extend(_period_rows(snapshot_id, summary))
    children.extend(
        PacingMissingPeriod(snapshot_id=snapshot_id, period_key=e.key)
        for e in summary.missing_periods
    )
    children.extend(_alert_rows(snapshot_id, summary.pace_flags, "linear"))
    children.extend(_alert_rows(snapshot_id, summary.weighted_pace_flags, "weighted"))
    children.extend(
        PacingProjection(snapshot_id=snapshot_id, period_key=entry.key, amount=_money(amount))
        for entry, amount in summary.projection.items()
    )
    children.extend(
        PacingInactiveStreak(
            snapshot_id=snapshot_id,
            start_period=s.start.key,
            end_period=s.end.key,
            length=s.length,
            total_expected=_money(s.total_expected),
            total_actual=_money(s.total_actual),
        )
        for s in summary.inactive_streaks
    )
    children.extend(_breakdown_rows(snapshot_id, summary.top_categories, "category"))
    children.extend(_breakdown_rows(snapshot_id, summary.top_cohorts, "cohort"))
    children.extend(_target_rows(snapshot_id, summary.category_targets, "category"))
    children.extend(_target_rows(snapshot_id, summary.cohort_targets, "cohort"))

    session.add_all(children)
    session.flush()

    _logger.info(
        "persistence:snapshot id=%s periods=%d rows=%d", snapshot_id, len(summary.period_entries),
        len(children) + 1,
    )
    return str(snapshot_id)


__all__ = ["sync_snapshot"]
