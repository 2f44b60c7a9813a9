"""Small builders for award records and configs used across tests."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from award_pacing.models import Config, Record


def rec(
    day: str, amount: str | int, category: str = "Tuition", cohort: str = "Fall 2025"
) -> Record:
    """Build a record from ``YYYY-MM-DD`` and an amount."""

    year, month, dom = (int(p) for p in day.split("-"))
    return Record(
        year=year,
        month=month,
        day=dom,
        amount=Decimal(str(amount)),
        category=category,
        cohort=cohort,
    )


def cfg(budget: str | int = 1200, **kwargs: Any) -> Config:
    return Config(annual_budget=Decimal(str(budget)), **kwargs)
