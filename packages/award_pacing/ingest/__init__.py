"""CSV ingestion for award records."""

from .utils import load_records_from_csv

__all__ = ["load_records_from_csv"]
