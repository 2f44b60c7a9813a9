from __future__ import annotations

import random
from datetime import date
from decimal import Decimal

import pytest

from award_pacing.distribution import (
    build_award_stats,
    build_cadence,
    build_size_bands,
    build_top_awards,
    compute_concentration,
    compute_median,
    compute_std_dev,
)

from tests.helpers.records import rec


def _d(*values) -> list[Decimal]:
    return [Decimal(str(v)) for v in values]


def test_median_odd_even_and_empty():
    assert compute_median(_d(3, 1, 2)) == Decimal(2)
    assert compute_median(_d(4, 1, 3, 2)) == Decimal("2.5")
    assert compute_median([]) == Decimal(0)


def test_population_std_dev():
    assert float(compute_std_dev(_d(100, 200, 300))) == pytest.approx(81.6497, abs=1e-3)
    assert compute_std_dev([]) == Decimal(0)


def test_concentration_caps_at_available_values():
    assert compute_concentration(_d(50, 50, 100), 1) == Decimal("0.5")
    assert compute_concentration(_d(25, 25, 50), 5) == Decimal(1)
    assert compute_concentration([], 5) == Decimal(0)


def test_award_stats():
    stats = build_award_stats(_d(100, 200, 300))
    assert stats.count == 3
    assert stats.total == Decimal(600)
    assert stats.mean == Decimal(200)
    assert stats.median == Decimal(200)
    assert (stats.minimum, stats.maximum) == (Decimal(100), Decimal(300))
    assert float(stats.coefficient_of_variation) == pytest.approx(0.4082, abs=1e-3)


def test_size_bands_cover_all_ranges_with_inclusive_lower_bounds():
    bands = build_size_bands(_d(999.99, 1000, 5000, 60000))

    assert [b.label for b in bands] == [
        "Under $1K",
        "$1K-$5K",
        "$5K-$10K",
        "$10K-$25K",
        "$25K-$50K",
        "$50K+",
    ]
    counts = {b.label: b.count for b in bands}
    assert counts == {
        "Under $1K": 1,
        "$1K-$5K": 1,
        "$5K-$10K": 1,
        "$10K-$25K": 0,
        "$25K-$50K": 0,
        "$50K+": 1,
    }
    assert float(sum(b.share for b in bands)) == pytest.approx(1.0)
    empty = next(b for b in bands if b.label == "$10K-$25K")
    assert (empty.total, empty.average, empty.share) == (Decimal(0), Decimal(0), Decimal(0))


def test_top_awards_keep_input_order_on_ties():
    records = [
        rec("2025-01-01", 10, "A"),
        rec("2025-01-02", 50, "B"),
        rec("2025-01-03", 50, "C"),
        rec("2025-01-04", 5, "D"),
    ]
    top = build_top_awards(records, limit=3)
    assert [(a.category, a.amount) for a in top] == [
        ("B", Decimal(50)),
        ("C", Decimal(50)),
        ("A", Decimal(10)),
    ]
    assert top[0].date == date(2025, 1, 2)


def test_cadence_uses_distinct_days():
    cadence = build_cadence(
        [rec("2025-01-01", 1), rec("2025-01-01", 2), rec("2025-01-06", 3)]
    )
    assert cadence is not None
    assert cadence.unique_days == 2
    assert cadence.gap_count == 1
    assert cadence.average_gap_days == 5
    assert cadence.median_gap_days == 5
    assert cadence.max_gap_days == 5
    assert cadence.recent_gap_days == 5


def test_cadence_requires_two_days():
    assert build_cadence([rec("2025-01-01", 1), rec("2025-01-01", 2)]) is None


def test_cadence_recent_gap_is_last_gap():
    cadence = build_cadence(
        [rec("2025-01-01", 1), rec("2025-01-11", 1), rec("2025-01-14", 1)]
    )
    assert cadence is not None
    assert cadence.max_gap_days == 10
    assert cadence.recent_gap_days == 3
    assert cadence.average_gap_days == pytest.approx(6.5)


def test_std_dev_is_independent_of_value_order():
    values = _d(21214, 56, 8120, 28988, 47053, 29462, 22952, 19976, 35344, 26176, 22241)
    expected = build_award_stats(values)
    rng = random.Random(11)
    for _ in range(50):
        shuffled = list(values)
        rng.shuffle(shuffled)
        assert compute_std_dev(shuffled) == expected.std_dev
        assert build_award_stats(shuffled) == expected
