"""Date-range, category and cohort filtering applied before aggregation."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Config, Record


def normalize_label(value: str) -> str:
    """Trim and lowercase a category/cohort label for case-insensitive matching."""

    return value.strip().lower()


def apply_filters(records: Iterable[Record], config: Config) -> list[Record]:
    """Return the records that pass every configured filter, in input order.

    - ``start_date``/``end_date`` are inclusive bounds on the record date.
    - ``category_filters``/``cohort_filters`` are sets of lowercased names;
      an empty set disables that filter.
    - Records whose date is not a real calendar day are dropped.
    """

    categories = frozenset(config.category_filters)
    cohorts = frozenset(config.cohort_filters)

    kept: list[Record] = []
    for record in records:
        day = record.calendar_date()
        if day is None:
            continue
        if config.start_date is not None and day < config.start_date:
            continue
        if config.end_date is not None and day > config.end_date:
            continue
        if categories and normalize_label(record.category) not in categories:
            continue
        if cohorts and normalize_label(record.cohort) not in cohorts:
            continue
        kept.append(record)
    return kept


__all__ = ["apply_filters", "normalize_label"]
