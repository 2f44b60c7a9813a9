from __future__ import annotations

from decimal import Decimal

from award_pacing.aggregate import aggregate
from award_pacing.expectations import (
    build_weighted_expectations,
    expected_per_period,
    weighted_totals,
)
from award_pacing.models import PeriodType

from tests.helpers.records import cfg, rec


def _weights(*head: str, fill: str = "0", size: int = 12) -> tuple[Decimal, ...]:
    values = [Decimal(v) for v in head]
    return tuple(values + [Decimal(fill)] * (size - len(values)))


def test_linear_expectation_per_period():
    assert expected_per_period(Decimal(1200), PeriodType.MONTH) == Decimal(100)
    assert expected_per_period(Decimal(1200), PeriodType.QUARTER) == Decimal(300)


def test_weighted_expectations_scale_budget_by_weight():
    agg = aggregate([rec("2025-01-15", 10), rec("2025-02-15", 10)], PeriodType.MONTH)
    config = cfg(1200, period_weights=_weights("0.5", "0.25", "0.25"))

    expected = build_weighted_expectations(agg.ordered_entries(), config)

    assert expected == {"2025-01": Decimal(600), "2025-02": Decimal(300)}


def test_no_weights_means_no_weighted_expectations():
    agg = aggregate([rec("2025-01-15", 10)], PeriodType.MONTH)
    assert build_weighted_expectations(agg.ordered_entries(), cfg(1200)) is None
    assert weighted_totals(agg.period_totals, None) is None


def test_weighted_totals_over_observed_periods():
    agg = aggregate([rec("2025-01-05", 100), rec("2025-02-10", 200)], PeriodType.MONTH)
    config = cfg(1000, period_weights=_weights("0.1", "0.2", fill="0.07"))
    expected = build_weighted_expectations(agg.ordered_entries(), config)

    result = weighted_totals(agg.period_totals, expected)

    assert result is not None
    expected_total, variance, pace = result
    assert expected_total == Decimal(300)
    assert variance == Decimal(0)
    assert pace == Decimal(1)


def test_quarter_weights_use_quarter_index():
    agg = aggregate([rec("2025-11-15", 10)], PeriodType.QUARTER)
    config = cfg(
        1000,
        period=PeriodType.QUARTER,
        period_weights=_weights("0.1", "0.2", "0.3", "0.4", size=4),
    )
    assert build_weighted_expectations(agg.ordered_entries(), config) == {
        "2025-Q4": Decimal(400)
    }
