"""Single-key sorting over nested row fields."""

import datetime
import numbers
from typing import Any, List, Optional, Sequence, Tuple

from .normalize import is_missing, resolve_path

SORT_ASC = "asc"
SORT_DESC = "desc"

# Type ranks for the total order used when a column mixes value types.
# Absent values rank last, so they end up at the bottom of an ascending sort.
_RANK_NUMBER = 0
_RANK_STRING = 1
_RANK_DATE = 2
_RANK_OTHER = 3
_RANK_ABSENT = 4


def sort_value_key(value: Any) -> Tuple[int, Any]:
    """
    Build a sort key that totally orders values of any type.

    Numbers (including booleans) come first, then strings, then dates and
    datetimes (compared by ISO text), then any other value by its str(),
    then absent values (None and NaN).

    Args:
        value: Resolved cell value

    Returns:
        (rank, comparable) tuple
    """
    if is_missing(value):
        return (_RANK_ABSENT, 0)
    if isinstance(value, numbers.Number) and not isinstance(value, complex):
        return (_RANK_NUMBER, value)
    if isinstance(value, str):
        return (_RANK_STRING, value)
    if isinstance(value, (datetime.date, datetime.time)):
        return (_RANK_DATE, value.isoformat())
    return (_RANK_OTHER, str(value))


def sort_rows(
    rows: Sequence[Any],
    sort_key: Optional[str],
    direction: str = SORT_ASC,
) -> List[Any]:
    """
    Sort rows by the value at a dot path.

    Args:
        rows: Filtered rows
        sort_key: Column path to sort by, or None to keep input order
        direction: "asc" or "desc"

    Returns:
        New sorted list (input is not modified)
    """
    if not sort_key:
        return list(rows)
    if direction not in (SORT_ASC, SORT_DESC):
        raise ValueError(f"Sort direction must be 'asc' or 'desc', got '{direction}'")

    return sorted(
        rows,
        key=lambda row: sort_value_key(resolve_path(row, sort_key)),
        reverse=direction == SORT_DESC,
    )


def next_sort(
    current_key: Optional[str], current_direction: str, clicked_key: str
) -> Tuple[str, str]:
    """
    Apply the header click protocol.

    Clicking the active column flips its direction; clicking another column
    makes it the sort key in ascending order.

    Returns:
        (sort_key, direction) after the click
    """
    if current_key == clicked_key:
        return clicked_key, SORT_DESC if current_direction == SORT_ASC else SORT_ASC
    return clicked_key, SORT_ASC
