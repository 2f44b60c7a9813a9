from __future__ import annotations

from decimal import Decimal

from award_pacing.aggregate import aggregate
from award_pacing.gaps import build_inactive_streaks, build_missing_periods
from award_pacing.models import PeriodType

from tests.helpers.records import rec


def _entries_and_totals(records, period=PeriodType.MONTH):
    agg = aggregate(records, period)
    return agg.ordered_entries(), agg.period_totals


def test_inactive_streak_spans_zero_and_missing_periods():
    entries, totals = _entries_and_totals(
        [rec("2025-01-10", 100), rec("2025-02-10", 0), rec("2025-04-10", 50)]
    )
    streaks = build_inactive_streaks(entries, totals, PeriodType.MONTH, Decimal(100))

    assert len(streaks) == 1
    s = streaks[0]
    assert (s.start.key, s.end.key, s.length) == ("2025-02", "2025-03", 2)
    assert s.total_expected == Decimal(200)
    assert s.total_actual == Decimal(0)


def test_zero_total_period_is_not_missing():
    entries, totals = _entries_and_totals(
        [rec("2025-01-10", 100), rec("2025-02-10", 0), rec("2025-04-10", 50)]
    )
    missing = build_missing_periods(entries, totals, PeriodType.MONTH)
    assert [e.key for e in missing] == ["2025-03"]


def test_missing_quarters_across_year_end():
    entries, totals = _entries_and_totals(
        [rec("2024-11-01", 10), rec("2025-08-01", 10)], PeriodType.QUARTER
    )
    missing = build_missing_periods(entries, totals, PeriodType.QUARTER)
    assert [e.key for e in missing] == ["2025-Q1", "2025-Q2"]


def test_single_period_has_no_gaps():
    entries, totals = _entries_and_totals([rec("2025-01-10", 100)])
    assert build_missing_periods(entries, totals, PeriodType.MONTH) == []
    assert build_inactive_streaks(entries, totals, PeriodType.MONTH, Decimal(100)) == []


def test_streaks_sorted_longest_first_then_earliest():
    entries, totals = _entries_and_totals(
        [
            rec("2025-01-01", 10),
            # gap: Feb
            rec("2025-03-01", 10),
            # gap: Apr, May
            rec("2025-06-01", 10),
            # gap: Jul
            rec("2025-08-01", 10),
        ]
    )
    streaks = build_inactive_streaks(entries, totals, PeriodType.MONTH, Decimal(1))
    assert [(s.start.key, s.length) for s in streaks] == [
        ("2025-04", 2),
        ("2025-02", 1),
        ("2025-07", 1),
    ]


def test_observed_plus_missing_covers_span():
    records = [rec(d, 5) for d in ("2023-11-03", "2024-02-10", "2024-02-11", "2024-09-30")]
    for period, span in ((PeriodType.MONTH, 11), (PeriodType.QUARTER, 4)):
        entries, totals = _entries_and_totals(records, period)
        missing = build_missing_periods(entries, totals, period)
        assert len(entries) + len(missing) == span
        assert not {e.key for e in entries} & {e.key for e in missing}
