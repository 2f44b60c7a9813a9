from __future__ import annotations

from datetime import date
from decimal import Decimal

from award_pacing.aggregate import aggregate
from award_pacing.filters import apply_filters
from award_pacing.models import PeriodType, Record

from tests.helpers.records import cfg, rec


def test_aggregate_totals_agree_across_views():
    records = [
        rec("2025-01-05", "100.10", "Tuition", "Fall"),
        rec("2025-01-20", "50.20", "Books", "Fall"),
        rec("2025-03-02", "300.30", "tuition", "Spring"),
        rec("2026-01-01", "10", "Housing", "Spring"),
    ]
    agg = aggregate(records, PeriodType.MONTH)

    total = Decimal("460.60")
    assert agg.total_amount == total
    assert sum(agg.period_totals.values()) == total
    assert sum(agg.category_totals.values()) == total
    assert sum(agg.cohort_totals.values()) == total
    assert sum(agg.year_totals.values()) == total

    assert agg.period_totals["2025-01"] == Decimal("150.30")
    assert agg.period_counts["2025-01"] == 2
    # Labels are aggregated exactly as written; case-folding is for targets only.
    assert set(agg.category_totals) == {"Tuition", "Books", "tuition", "Housing"}
    assert agg.year_periods[2025] == frozenset({"2025-01", "2025-03"})
    assert (agg.start_date, agg.end_date) == (date(2025, 1, 5), date(2026, 1, 1))
    assert [e.key for e in agg.ordered_entries()] == ["2025-01", "2025-03", "2026-01"]


def test_aggregate_skips_impossible_dates():
    bad = Record(
        year=2025, month=2, day=30, amount=Decimal(5), category="Tuition", cohort="Fall"
    )
    agg = aggregate([bad, rec("2025-02-01", 7)], PeriodType.MONTH)
    assert agg.total_amount == Decimal(7)
    assert len(agg.records) == 1


def test_filters_dates_inclusive_and_labels_case_insensitive():
    records = [
        rec("2025-01-01", 1, "Tuition", "Fall"),
        rec("2025-01-31", 2, "BOOKS", "Fall"),
        rec("2025-02-01", 4, "Tuition", "Spring"),
        rec("2024-12-31", 8, "Tuition", "Fall"),
    ]
    config = cfg(
        start_date=date(2025, 1, 1),
        end_date=date(2025, 1, 31),
        category_filters=("books", "tuition"),
        cohort_filters=("fall",),
    )
    kept = apply_filters(records, config)
    assert [r.amount for r in kept] == [Decimal(1), Decimal(2)]


def test_empty_filter_sets_keep_everything():
    records = [rec("2025-01-01", 1), rec("2025-05-01", 2)]
    assert apply_filters(records, cfg()) == records
