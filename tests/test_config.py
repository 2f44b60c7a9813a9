from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from award_pacing.config import (
    ConfigError,
    build_config,
    parse_period_weights,
    parse_target_list,
)
from award_pacing.models import PeriodType


def test_build_config_parses_all_flags():
    config = build_config(
        budget="120000",
        period="Quarter",
        period_weights="1,1,1,1",
        projection_periods=3,
        start_date="2025-01-01",
        end_date="2025-12-31",
        categories="Tuition, ,Books",
        cohorts="Fall 2025",
        category_targets="Tuition=60,Books=0.4",
        export_path=Path("out/report.json"),
        db_sync=True,
        db_schema="pacing",
    )

    assert config.annual_budget == Decimal(120000)
    assert config.period is PeriodType.QUARTER
    assert config.period_weights == (Decimal("0.25"),) * 4
    assert config.projection_periods == 3
    assert (config.start_date, config.end_date) == (date(2025, 1, 1), date(2025, 12, 31))
    assert config.category_filters == ("tuition", "books")
    assert config.cohort_filters == ("fall 2025",)
    assert [(t.name, t.share, t.normalized) for t in config.category_targets] == [
        ("Tuition", Decimal("0.6"), "tuition"),
        ("Books", Decimal("0.4"), "books"),
    ]
    assert config.cohort_targets == ()
    assert config.db_sync is True
    assert config.db_schema == "pacing"


@pytest.mark.parametrize("budget", ["0", "-5", "abc", "NaN", "Infinity"])
def test_budget_must_be_positive_number(budget: str):
    with pytest.raises(ConfigError) as exc:
        build_config(budget=budget)
    assert exc.value.flag == "--budget"


def test_invalid_period_and_dates():
    with pytest.raises(ConfigError, match="--period"):
        build_config(budget="100", period="week")
    with pytest.raises(ConfigError, match="--start-date"):
        build_config(budget="100", start_date="2025-02-30")
    with pytest.raises(ConfigError, match="Start date is after end date"):
        build_config(budget="100", start_date="2025-05-01", end_date="2025-01-01")


def test_weights_count_must_match_period():
    with pytest.raises(ConfigError, match="Expected 12 weights"):
        parse_period_weights("1,2,3,4", PeriodType.MONTH)
    with pytest.raises(ConfigError, match="--period-weights"):
        parse_period_weights("0,0,0,0", PeriodType.QUARTER)
    with pytest.raises(ConfigError):
        parse_period_weights("1,1,-1,1", PeriodType.QUARTER)


def test_weights_are_normalized():
    weights = parse_period_weights("2,2,4,0,0,0,0,0,0,0,0,0", PeriodType.MONTH)
    assert weights is not None
    assert weights[:3] == (Decimal("0.25"), Decimal("0.25"), Decimal("0.5"))
    assert parse_period_weights(None, PeriodType.MONTH) is None


@pytest.mark.parametrize(
    "raw",
    ["Tuition", "=0.5", "Tuition=abc", "Tuition=-0.1", "Tuition=0.7,Books=0.4"],
)
def test_rejects_bad_target_lists(raw: str):
    with pytest.raises(ConfigError) as exc:
        parse_target_list(raw, "--category-targets")
    assert exc.value.flag == "--category-targets"


def test_target_total_tolerance():
    targets = parse_target_list("A=0.5,B=0.5005", "--cohort-targets")
    assert len(targets) == 2
    with pytest.raises(ConfigError, match="Target shares exceed 100%"):
        parse_target_list("A=0.5,B=0.502", "--cohort-targets")
