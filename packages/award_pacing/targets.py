"""Category/cohort breakdowns and reconciliation against target shares."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence
from decimal import Decimal

from .filters import normalize_label
from .models import Breakdown, TargetConfig, TargetVariance

_ZERO = Decimal(0)
_HUNDRED = Decimal(100)


def build_breakdown(
    totals: Mapping[str, Decimal], total_amount: Decimal, limit: int = 5
) -> list[Breakdown]:
    """Largest ``limit`` labels by spend with their percent share of the total.

    Ties are ordered by name so the output does not depend on input order.
    """

    if total_amount <= 0 or not totals:
        return []
    ranked = sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    return [
        Breakdown(name=name, amount=amount, share=amount / total_amount * _HUNDRED)
        for name, amount in ranked[:limit]
    ]


def build_target_variances(
    targets: Sequence[TargetConfig],
    totals: Mapping[str, Decimal],
    total_amount: Decimal,
) -> list[TargetVariance]:
    """Compare actual spend per named target against ``total_amount * share``.

    Labels are matched case-insensitively after trimming; labels that collapse
    to the same normalized name are summed. Only configured targets are
    reported, in configuration order.
    """

    if not targets:
        return []
    normalized: dict[str, Decimal] = defaultdict(Decimal)
    for name, amount in totals.items():
        normalized[normalize_label(name)] += amount

    results: list[TargetVariance] = []
    for target in targets:
        actual = normalized.get(target.normalized, _ZERO)
        expected = total_amount * target.share
        results.append(
            TargetVariance(
                name=target.name,
                target_share=target.share,
                actual_amount=actual,
                expected_amount=expected,
                variance=actual - expected,
                actual_share=actual / total_amount if total_amount > 0 else _ZERO,
            )
        )
    return results


__all__ = ["build_breakdown", "build_target_variances"]
