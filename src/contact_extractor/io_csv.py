"""CSV serialization helpers."""

from __future__ import annotations

import csv
from pathlib import Path

from .models import BatchResultRow

CSV_FIELDS = ["keyword", "name", "email"]


def write_rows(path: str, rows: list[BatchResultRow]) -> None:
    """Write result rows to CSV with stable schema."""
    output_path = Path(path)
    with output_path.open("w", newline="", encoding="utf-8") as file_obj:
        writer = csv.DictWriter(file_obj, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row.as_dict())
