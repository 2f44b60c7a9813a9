from __future__ import annotations

from decimal import Decimal

from award_pacing.models import TargetConfig
from award_pacing.targets import build_breakdown, build_target_variances


def _target(name: str, share: str) -> TargetConfig:
    return TargetConfig(name=name, share=Decimal(share), normalized=name.strip().lower())


def test_breakdown_ranks_by_amount_then_name_with_percent_share():
    totals = {"Books": Decimal(100), "Tuition": Decimal(600), "Housing": Decimal(100)}
    rows = build_breakdown(totals, Decimal(800), limit=2)

    assert [(r.name, r.amount) for r in rows] == [
        ("Tuition", Decimal(600)),
        ("Books", Decimal(100)),
    ]
    assert rows[0].share == Decimal(75)


def test_breakdown_empty_when_no_spend():
    assert build_breakdown({"Tuition": Decimal(0)}, Decimal(0)) == []


def test_target_variances_match_case_insensitively_and_sum_collapsed_labels():
    totals = {"Tuition": Decimal(300), " tuition ": Decimal(100), "Books": Decimal(600)}
    rows = build_target_variances(
        [_target("TUITION", "0.5"), _target("Stipend", "0.1")], totals, Decimal(1000)
    )

    tuition, stipend = rows
    assert tuition.name == "TUITION"
    assert tuition.actual_amount == Decimal(400)
    assert tuition.expected_amount == Decimal(500)
    assert tuition.variance == Decimal(-100)
    assert tuition.actual_share == Decimal("0.4")

    assert stipend.actual_amount == Decimal(0)
    assert stipend.expected_amount == Decimal(100)
    assert stipend.variance == Decimal(-100)


def test_target_variances_zero_total():
    rows = build_target_variances([_target("Tuition", "0.5")], {}, Decimal(0))
    assert rows[0].actual_share == Decimal(0)
    assert rows[0].expected_amount == Decimal(0)


def test_no_targets_no_rows():
    assert build_target_variances([], {"Tuition": Decimal(1)}, Decimal(1)) == []
