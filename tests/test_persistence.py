# ruff: noqa: I001
from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import func, select

from pacing_db.client import ensure_schema, session_scope
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

from award_pacing.models import TargetConfig
from award_pacing.persistence import sync_snapshot
from award_pacing.summary import build_summary

from tests.helpers.db import bootstrap_sqlite_db
from tests.helpers.records import cfg, rec

pytestmark = pytest.mark.filterwarnings("ignore::sqlalchemy.exc.SAWarning")


def _summary_and_config():
    weights = tuple([Decimal("0.5"), Decimal("0.5")] + [Decimal(0)] * 10)
    config = cfg(
        1200,
        period_weights=weights,
        projection_periods=2,
        cohort_filters=("fall", "spring"),
        category_targets=(TargetConfig("Tuition", Decimal("0.6"), "tuition"),),
    )
    records = [
        rec("2025-01-05", "100.005", "Tuition", "Fall"),
        rec("2025-03-02", 300, "Books", "Spring"),
    ]
    return build_summary(records, config), config


def _count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


def test_sync_snapshot_writes_parent_and_children(tmp_path: Path):
    url = bootstrap_sqlite_db(tmp_path / "pacing.db")
    summary, config = _summary_and_config()
    generated = datetime(2025, 4, 1, 9, 30, tzinfo=UTC)

    with session_scope(database_url=url) as session:
        snapshot_id = sync_snapshot(session, summary, config, generated_at=generated)

    with session_scope(database_url=url) as session:
        snap = session.scalars(select(PacingSnapshot)).one()
        assert str(snap.snapshot_id) == snapshot_id
        assert snap.period_type == "month"
        assert snap.total_records == 2
        # Money is stored at cent precision, half-up.
        assert snap.total_amount == Decimal("400.01")
        assert snap.expected_total == Decimal("200.00")
        assert snap.filters == {
            "start_date": None,
            "end_date": None,
            "categories": [],
            "cohorts": ["fall", "spring"],
        }

        assert _count(session, PacingPeriod) == 2
        assert _count(session, PacingMissingPeriod) == 1
        assert _count(session, PacingProjection) == 2
        assert _count(session, PacingInactiveStreak) == 1
        assert _count(session, PacingTarget) == 1

        alert_types = sorted(session.scalars(select(PacingAlert.alert_type)))
        assert alert_types == ["linear", "weighted", "weighted"]

        breakdowns = session.scalars(
            select(PacingBreakdown).order_by(PacingBreakdown.breakdown_type, PacingBreakdown.name)
        ).all()
        assert [(b.breakdown_type, b.name) for b in breakdowns] == [
            ("category", "Books"),
            ("category", "Tuition"),
            ("cohort", "Fall"),
            ("cohort", "Spring"),
        ]

        first = session.scalars(select(PacingPeriod).order_by(PacingPeriod.period_key)).first()
        assert first is not None
        assert first.period_key == "2025-01"
        assert first.record_count == 1
        assert first.pace == Decimal("1.0001")


def test_failed_sync_rolls_back(tmp_path: Path):
    url = bootstrap_sqlite_db(tmp_path / "pacing.db")
    summary, config = _summary_and_config()

    with pytest.raises(RuntimeError):
        with session_scope(database_url=url) as session:
            sync_snapshot(session, summary, config)
            raise RuntimeError("boom")

    with session_scope(database_url=url) as session:
        assert _count(session, PacingSnapshot) == 0
        assert _count(session, PacingPeriod) == 0


def test_ensure_schema_creates_tables_on_empty_database(tmp_path: Path):
    url = f"sqlite+pysqlite:///{tmp_path / 'fresh.db'}"
    summary, config = _summary_and_config()

    with session_scope(database_url=url, schema="award_pacing_monitor") as session:
        ensure_schema(session, "award_pacing_monitor")
        sync_snapshot(session, summary, config)

    with session_scope(database_url=url) as session:
        assert _count(session, PacingSnapshot) == 1


def test_large_pace_values_are_stored(tmp_path: Path):
    url = bootstrap_sqlite_db(tmp_path / "pacing.db")
    config = cfg("0.01")
    summary = build_summary([rec("2025-01-05", 500000)], config)

    with session_scope(database_url=url) as session:
        sync_snapshot(session, summary, config)

    with session_scope(database_url=url) as session:
        period = session.scalars(select(PacingPeriod)).one()
        alert = session.scalars(select(PacingAlert)).one()
        assert period.pace == Decimal(600000000)
        assert alert.pace == Decimal(600000000)


def test_pace_columns_have_no_precision_limit():
    for model in (PacingPeriod, PacingAlert):
        pace_type = model.__table__.c.pace.type
        assert (pace_type.precision, pace_type.scale) == (None, None)
