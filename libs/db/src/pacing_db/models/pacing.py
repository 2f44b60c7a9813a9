from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Tables are declared without a schema. The configured schema (default
# ``award_pacing_monitor``) is applied at runtime via ``schema_translate_map``.
DEFAULT_SCHEMA = "award_pacing_monitor"

# BIGINT identity on Postgres, rowid alias on SQLite.
_PK = BigInteger().with_variant(Integer(), "sqlite")

MONEY = Numeric(18, 2)
RATIO = Numeric(12, 4)
# Pace is actual over expected and is unbounded when the budget is small.
PACE = Numeric()


class Base(DeclarativeBase):
    pass


def _snapshot_fk() -> Any:
    return mapped_column(
        Uuid,
        ForeignKey("snapshots.snapshot_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


# ---------------------------
# Core: snapshots
# ---------------------------


class PacingSnapshot(Base):
    __tablename__ = "snapshots"

    snapshot_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    period_type: Mapped[str] = mapped_column(String, nullable=False)
    annual_budget: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_records: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    expected_total: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    variance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    average_award: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    median_award: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    # {"start_date", "end_date", "categories", "cohorts"} as applied to the run.
    filters: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        CheckConstraint("period_type in ('month','quarter')", name="ck_snapshots_period_type"),
    )


# ---------------------------
# Per-period rows
# ---------------------------


class PacingPeriod(Base):
    __tablename__ = "periods"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    snapshot_id: Mapped[uuid.UUID] = _snapshot_fk()
    period_key: Mapped[str] = mapped_column(String, nullable=False)
    actual: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    expected: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    pace: Mapped[Decimal] = mapped_column(PACE, nullable=False)
    record_count: Mapped[int] = mapped_column(Integer, nullable=False)
    average_award: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    cumulative_actual: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    cumulative_expected: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    cumulative_variance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)


class PacingMissingPeriod(Base):
    __tablename__ = "missing_periods"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    snapshot_id: Mapped[uuid.UUID] = _snapshot_fk()
    period_key: Mapped[str] = mapped_column(String, nullable=False)


class PacingAlert(Base):
    __tablename__ = "pace_alerts"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    snapshot_id: Mapped[uuid.UUID] = _snapshot_fk()
    # 'linear' for the flat budget curve, 'weighted' for the seasonality curve.
    alert_type: Mapped[str] = mapped_column(String, nullable=False)
    period_key: Mapped[str] = mapped_column(String, nullable=False)
    actual: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    expected: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    variance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    pace: Mapped[Decimal] = mapped_column(PACE, nullable=False)

    __table_args__ = (
        CheckConstraint("alert_type in ('linear','weighted')", name="ck_pace_alerts_alert_type"),
    )


class PacingProjection(Base):
    __tablename__ = "projections"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    snapshot_id: Mapped[uuid.UUID] = _snapshot_fk()
    period_key: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)


class PacingInactiveStreak(Base):
    __tablename__ = "inactive_streaks"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    snapshot_id: Mapped[uuid.UUID] = _snapshot_fk()
    start_period: Mapped[str] = mapped_column(String, nullable=False)
    end_period: Mapped[str] = mapped_column(String, nullable=False)
    length: Mapped[int] = mapped_column(Integer, nullable=False)
    total_expected: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    total_actual: Mapped[Decimal] = mapped_column(MONEY, nullable=False)


# ---------------------------
# Category / cohort rows
# ---------------------------


class PacingBreakdown(Base):
    __tablename__ = "breakdowns"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    snapshot_id: Mapped[uuid.UUID] = _snapshot_fk()
    breakdown_type: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    # Percent of total spend (0-100).
    share: Mapped[Decimal] = mapped_column(RATIO, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "breakdown_type in ('category','cohort')", name="ck_breakdowns_breakdown_type"
        ),
    )


class PacingTarget(Base):
    __tablename__ = "targets"

    id: Mapped[int] = mapped_column(_PK, primary_key=True, autoincrement=True)
    snapshot_id: Mapped[uuid.UUID] = _snapshot_fk()
    target_type: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    target_share: Mapped[Decimal] = mapped_column(RATIO, nullable=False)
    actual_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    expected_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    variance: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    actual_share: Mapped[Decimal] = mapped_column(RATIO, nullable=False)

    __table_args__ = (
        CheckConstraint("target_type in ('category','cohort')", name="ck_targets_target_type"),
    )


__all__ = [
    "DEFAULT_SCHEMA",
    "Base",
    "PacingAlert",
    "PacingBreakdown",
    "PacingInactiveStreak",
    "PacingMissingPeriod",
    "PacingPeriod",
    "PacingProjection",
    "PacingSnapshot",
    "PacingTarget",
]
