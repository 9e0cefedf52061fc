"""CSV materialization of the filtered and sorted table rows."""

import csv
import datetime
import re
from typing import Any, Optional, Sequence

import pandas as pd

from ..core.descriptors import Column
from ..preprocessing.normalize import resolve_path, stringify

CSV_MIME_TYPE = "text/csv"


def build_csv(rows: Sequence[Any], columns: Sequence[Column]) -> str:
    """
    Serialize rows to CSV text.

    The header holds the column labels (key when no label). Each field is
    the raw value at the column path, never the render output, with absent
    values written as "". Every field is quoted and embedded quotes are
    doubled. Lines are joined with "\\n" and there is no trailing newline.

    Args:
        rows: Filtered and sorted rows (all pages)
        columns: Table columns in display order

    Returns:
        CSV document (header only when there are no rows)
    """
    if not columns:
        return ""

    headers = [column.title for column in columns]
    records = [
        [stringify(resolve_path(row, column.key)) for column in columns]
        for row in rows
    ]

    # Positional integer columns keep duplicate labels intact
    frame = pd.DataFrame(records, columns=range(len(columns)), dtype=object)
    text = frame.to_csv(
        index=False,
        header=headers,
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    if text.endswith("\n"):
        text = text[:-1]
    return text


def export_filename(title: str, today: Optional[datetime.date] = None) -> str:
    """
    File name for an export: lower-cased title with whitespace runs
    replaced by underscores, followed by the date.

    Example:
        export_filename("Student List", date(2024, 5, 1))
        -> "student_list_2024-05-01.csv"
    """
    today = today or datetime.date.today()
    stem = re.sub(r"\s+", "_", title.lower())
    return f"{stem}_{today.isoformat()}.csv"
