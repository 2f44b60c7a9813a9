"""Adapter for mapping award CSV rows to :class:`~award_pacing.models.Record`.

Expected columns, by position (a header row is optional):
``date, amount[, category[, cohort]]``

- ``date``: ``YYYY-MM-DD``. Parts are parsed as integers only; impossible
  calendar days (``2025-02-30``) are kept here and dropped by the filter stage.
- ``amount``: decimal number, non-negative.
- ``category``: defaults to ``Uncategorized`` when absent or blank.
- ``cohort``: defaults to ``Unassigned`` when absent or blank.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from decimal import Decimal, InvalidOperation

from ...logging_setup import get_logger
from ...models import Record

DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_COHORT = "Unassigned"

_logger = get_logger("award_pacing.ingest.awards_csv")


def _parse_date_parts(value: str) -> tuple[int, int, int] | None:
    parts = value.strip().split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
    except ValueError:
        return None
    return year, month, day


def _parse_amount(value: str) -> Decimal | None:
    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return amount


def _cell(row: Sequence[str], index: int, default: str) -> str:
    if len(row) <= index:
        return default
    return row[index].strip() or default


def _is_header(row: Sequence[str]) -> bool:
    return "date" in ",".join(row).lower()


def to_records(rows: Iterable[Sequence[str]]) -> Iterator[Record]:
    """Convert ``csv.reader`` rows into records, skipping malformed lines.

    Mapping rules:
    - the first non-empty row is treated as a header when it mentions ``date``
    - rows with fewer than two cells are skipped
    - rows whose date or amount cannot be parsed are skipped (logged at debug)
    """

    seen_first = False
    for line_no, row in enumerate(rows, start=1):
        if not row or not any(cell.strip() for cell in row):
            continue
        if not seen_first:
            seen_first = True
            if _is_header(row):
                continue
        if len(row) < 2:
            _logger.debug("ingest:skip line=%d reason=too_few_cells", line_no)
            continue
        parts = _parse_date_parts(row[0])
        if parts is None:
            _logger.debug("ingest:skip line=%d reason=bad_date value=%r", line_no, row[0])
            continue
        amount = _parse_amount(row[1])
        if amount is None:
            _logger.debug("ingest:skip line=%d reason=bad_amount value=%r", line_no, row[1])
            continue
        year, month, day = parts
        yield Record(
            year=year,
            month=month,
            day=day,
            amount=amount,
            category=_cell(row, 2, DEFAULT_CATEGORY),
            cohort=_cell(row, 3, DEFAULT_COHORT),
        )


__all__ = ["DEFAULT_CATEGORY", "DEFAULT_COHORT", "to_records"]
