# ruff: noqa: I001
"""Pacing snapshot tables.

Revision ID: 0001_pacing_core
Revises: None
Create Date: 2026-10-19
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import context, op


# revision identifiers, used by Alembic.
revision: str = "0001_pacing_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

MONEY = sa.Numeric(18, 2)
RATIO = sa.Numeric(12, 4)
PACE = sa.Numeric()


def _schema() -> str | None:
    return context.config.attributes.get("pacing_schema")


def _child_columns() -> dict[str, tuple[list[sa.Column], list[sa.CheckConstraint]]]:
    return {
        "periods": (
            [
                sa.Column("period_key", sa.String(), nullable=False),
                sa.Column("actual", MONEY, nullable=False),
                sa.Column("expected", MONEY, nullable=False),
                sa.Column("pace", PACE, nullable=False),
                sa.Column("record_count", sa.Integer(), nullable=False),
                sa.Column("average_award", MONEY, nullable=False),
                sa.Column("cumulative_actual", MONEY, nullable=False),
                sa.Column("cumulative_expected", MONEY, nullable=False),
                sa.Column("cumulative_variance", MONEY, nullable=False),
            ],
            [],
        ),
        "missing_periods": ([sa.Column("period_key", sa.String(), nullable=False)], []),
        "pace_alerts": (
            [
                sa.Column("alert_type", sa.String(), nullable=False),
                sa.Column("period_key", sa.String(), nullable=False),
                sa.Column("actual", MONEY, nullable=False),
                sa.Column("expected", MONEY, nullable=False),
                sa.Column("variance", MONEY, nullable=False),
                sa.Column("pace", PACE, nullable=False),
            ],
            [
                sa.CheckConstraint(
                    "alert_type in ('linear','weighted')", name="ck_pace_alerts_alert_type"
                )
            ],
        ),
        "projections": (
            [
                sa.Column("period_key", sa.String(), nullable=False),
                sa.Column("amount", MONEY, nullable=False),
            ],
            [],
        ),
        "inactive_streaks": (
            [
                sa.Column("start_period", sa.String(), nullable=False),
                sa.Column("end_period", sa.String(), nullable=False),
                sa.Column("length", sa.Integer(), nullable=False),
                sa.Column("total_expected", MONEY, nullable=False),
                sa.Column("total_actual", MONEY, nullable=False),
            ],
            [],
        ),
        "breakdowns": (
            [
                sa.Column("breakdown_type", sa.String(), nullable=False),
                sa.Column("name", sa.Text(), nullable=False),
                sa.Column("amount", MONEY, nullable=False),
                sa.Column("share", RATIO, nullable=False),
            ],
            [
                sa.CheckConstraint(
                    "breakdown_type in ('category','cohort')",
                    name="ck_breakdowns_breakdown_type",
                )
            ],
        ),
        "targets": (
            [
                sa.Column("target_type", sa.String(), nullable=False),
                sa.Column("name", sa.Text(), nullable=False),
                sa.Column("target_share", RATIO, nullable=False),
                sa.Column("actual_amount", MONEY, nullable=False),
                sa.Column("expected_amount", MONEY, nullable=False),
                sa.Column("variance", MONEY, nullable=False),
                sa.Column("actual_share", RATIO, nullable=False),
            ],
            [
                sa.CheckConstraint(
                    "target_type in ('category','cohort')", name="ck_targets_target_type"
                )
            ],
        ),
    }


def upgrade() -> None:
    schema = _schema()
    fk_target = f"{schema}.snapshots.snapshot_id" if schema else "snapshots.snapshot_id"

    op.create_table(
        "snapshots",
        sa.Column("snapshot_id", sa.Uuid(), primary_key=True),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("period_type", sa.String(), nullable=False),
        sa.Column("annual_budget", MONEY, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("total_records", sa.Integer(), nullable=False),
        sa.Column("total_amount", MONEY, nullable=False),
        sa.Column("expected_total", MONEY, nullable=False),
        sa.Column("variance", MONEY, nullable=False),
        sa.Column("average_award", MONEY, nullable=False),
        sa.Column("median_award", MONEY, nullable=False),
        sa.Column("filters", sa.JSON(), nullable=False),
        sa.CheckConstraint("period_type in ('month','quarter')", name="ck_snapshots_period_type"),
        schema=schema,
    )

    for table, (columns, checks) in _child_columns().items():
        op.create_table(
            table,
            sa.Column("id", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), primary_key=True),
            sa.Column(
                "snapshot_id",
                sa.Uuid(),
                sa.ForeignKey(fk_target, ondelete="CASCADE"),
                nullable=False,
            ),
            *columns,
            *checks,
            schema=schema,
        )
        op.create_index(f"ix_{table}_snapshot_id", table, ["snapshot_id"], schema=schema)


def downgrade() -> None:
    schema = _schema()
    for table in reversed(list(_child_columns())):
        op.drop_index(f"ix_{table}_snapshot_id", table_name=table, schema=schema)
        op.drop_table(table, schema=schema)
    op.drop_table("snapshots", schema=schema)
