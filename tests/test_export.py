from __future__ import annotations

import json
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path

from award_pacing.export import build_export_payload, dump_payload, write_export
from award_pacing.models import TargetConfig
from award_pacing.summary import build_summary

from tests.helpers.records import cfg, rec

_GENERATED = datetime(2025, 5, 1, 12, 0, tzinfo=UTC)


def _summary_and_config(**overrides):
    records = [
        rec("2025-01-05", 100, "Tuition", "Fall"),
        rec("2025-03-02", 300, "Books", "Spring"),
    ]
    config = cfg(1200, projection_periods=1, **overrides)
    return build_summary(records, config), config


def test_payload_uses_camel_case_and_omits_absent_sections():
    summary, config = _summary_and_config()
    data = json.loads(dump_payload(build_export_payload(summary, config, _GENERATED)))

    assert data["generatedAt"] == "2025-05-01T12:00:00+00:00"
    assert data["periodType"] == "month"
    assert data["annualBudget"] == 1200.0
    assert data["dateRange"] == {"start": "2025-01-05", "end": "2025-03-02"}
    assert data["totals"]["records"] == 2
    assert data["totals"]["actual"] == 400.0
    assert data["totals"]["expected"] == 200.0
    assert data["totals"]["averageAward"] == 200.0
    assert data["missingPeriods"] == ["2025-02"]
    assert [a["period"] for a in data["paceAlerts"]] == ["2025-03"]
    assert data["weightedPaceAlerts"] == []
    assert data["projection"] == [{"period": "2025-04", "amount": 200.0}]
    assert data["inactiveStreaks"][0]["start"] == "2025-02"
    assert data["largestIncreases"][0]["previous"] == "2025-01"
    assert [b["name"] for b in data["topCategories"]] == ["Books", "Tuition"]
    assert data["filters"] == {"categories": [], "cohorts": []}

    # Optional sections are dropped rather than emitted as null.
    assert "seasonality" not in data
    assert "categoryTargets" not in data
    assert "cohortTargets" not in data
    assert "maximum" not in data["sizeBands"][-1]
    assert data["sizeBands"][0]["maximum"] == 1000.0


def test_payload_includes_seasonality_and_targets_when_configured():
    weights = tuple([Decimal("0.5"), Decimal("0.5")] + [Decimal(0)] * 10)
    summary, config = _summary_and_config(
        period_weights=weights,
        cohort_targets=(TargetConfig("Fall", Decimal("0.5"), "fall"),),
    )
    data = json.loads(dump_payload(build_export_payload(summary, config, _GENERATED)))

    assert data["seasonality"]["expectations"] == {"2025-01": 600.0, "2025-03": 0.0}
    assert data["seasonality"]["expectedTotal"] == 600.0
    assert data["cohortTargets"] == [
        {
            "name": "Fall",
            "targetShare": 0.5,
            "actualAmount": 100.0,
            "expectedAmount": 200.0,
            "variance": -100.0,
            "actualShare": 0.25,
        }
    ]


def test_write_export_creates_parents_and_replaces_atomically(tmp_path: Path):
    summary, config = _summary_and_config()
    payload = build_export_payload(summary, config, _GENERATED)
    target = tmp_path / "reports" / "pacing.json"

    written = write_export(payload, target)
    target.write_text("stale", encoding="utf-8")
    write_export(payload, target)

    assert written == target
    assert json.loads(target.read_text(encoding="utf-8"))["totals"]["records"] == 2
    assert sorted(p.name for p in target.parent.iterdir()) == ["pacing.json"]
    assert target.read_text(encoding="utf-8").endswith("\n")
