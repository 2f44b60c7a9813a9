"""Award-level statistics: spread, concentration, size bands, top awards, cadence."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from itertools import pairwise
from statistics import median

from .models import AwardStats, Cadence, Record, SizeBand, TopAward

_ZERO = Decimal(0)

# (label, inclusive minimum, exclusive maximum or None for open-ended)
SIZE_BANDS: tuple[tuple[str, Decimal, Decimal | None], ...] = (
    ("Under $1K", Decimal(0), Decimal(1000)),
    ("$1K-$5K", Decimal(1000), Decimal(5000)),
    ("$5K-$10K", Decimal(5000), Decimal(10000)),
    ("$10K-$25K", Decimal(10000), Decimal(25000)),
    ("$25K-$50K", Decimal(25000), Decimal(50000)),
    ("$50K+", Decimal(50000), None),
)


def compute_median(values: Iterable[Decimal]) -> Decimal:
    """Median of ``values``; an even count averages the two middle values. ``0`` if empty."""

    ordered = sorted(values)
    if not ordered:
        return _ZERO
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def compute_std_dev(values: Sequence[Decimal]) -> Decimal:
    """Population standard deviation (divides by N). ``0`` if empty.

    Sums run over the sorted values so the rounded result is the same for
    every ordering of the input.
    """

    if not values:
        return _ZERO
    ordered = sorted(values)
    mean = sum(ordered, _ZERO) / len(ordered)
    variance = sum(((v - mean) ** 2 for v in ordered), _ZERO) / len(ordered)
    return variance.sqrt()


def compute_coefficient_of_variation(std_dev: Decimal, mean: Decimal) -> Decimal:
    return std_dev / mean if mean > 0 else _ZERO


def compute_concentration(values: Sequence[Decimal], top_count: int) -> Decimal:
    """Share of the total held by the ``top_count`` largest values.

    Caps at the number of values, so asking for more than exist returns ``1``.
    """

    total = sum(values, _ZERO)
    if total <= 0 or top_count <= 0:
        return _ZERO
    top = sorted(values, reverse=True)[: min(top_count, len(values))]
    return sum(top, _ZERO) / total


def build_award_stats(amounts: Sequence[Decimal]) -> AwardStats:
    total = sum(sorted(amounts), _ZERO)
    mean = total / len(amounts) if amounts else _ZERO
    std_dev = compute_std_dev(amounts)
    return AwardStats(
        count=len(amounts),
        total=total,
        mean=mean,
        median=compute_median(amounts),
        std_dev=std_dev,
        coefficient_of_variation=compute_coefficient_of_variation(std_dev, mean),
        minimum=min(amounts, default=_ZERO),
        maximum=max(amounts, default=_ZERO),
    )


def build_size_bands(amounts: Sequence[Decimal]) -> list[SizeBand]:
    """Count, total, average and share of spend per fixed award-size band.

    All six bands are returned, including empty ones. ``share`` is a fraction
    of total spend (0-1).
    """

    total = sum(amounts, _ZERO)
    bands: list[SizeBand] = []
    for label, lo, hi in SIZE_BANDS:
        members = [a for a in amounts if a >= lo and (hi is None or a < hi)]
        band_total = sum(members, _ZERO)
        bands.append(
            SizeBand(
                label=label,
                minimum=lo,
                maximum=hi,
                count=len(members),
                total=band_total,
                average=band_total / len(members) if members else _ZERO,
                share=band_total / total if total > 0 else _ZERO,
            )
        )
    return bands


def build_top_awards(records: Sequence[Record], limit: int = 5) -> list[TopAward]:
    """The ``limit`` largest awards; equal amounts keep input order."""

    ranked = sorted(records, key=lambda r: r.amount, reverse=True)
    top: list[TopAward] = []
    for record in ranked:
        if len(top) >= limit:
            break
        day = record.calendar_date()
        if day is None:
            continue
        top.append(
            TopAward(date=day, amount=record.amount, category=record.category, cohort=record.cohort)
        )
    return top


def build_cadence(records: Iterable[Record]) -> Cadence | None:
    """Day gaps between distinct award days; ``None`` with fewer than two days."""

    days: set[date] = set()
    for record in records:
        day = record.calendar_date()
        if day is not None:
            days.add(day)
    if len(days) < 2:
        return None
    gaps = [(b - a).days for a, b in pairwise(sorted(days))]
    return Cadence(
        unique_days=len(days),
        gap_count=len(gaps),
        average_gap_days=sum(gaps) / len(gaps),
        median_gap_days=float(median(gaps)),
        max_gap_days=max(gaps),
        recent_gap_days=gaps[-1],
    )


__all__ = [
    "SIZE_BANDS",
    "build_award_stats",
    "build_cadence",
    "build_size_bands",
    "build_top_awards",
    "compute_coefficient_of_variation",
    "compute_concentration",
    "compute_median",
    "compute_std_dev",
]
