"""Row normalization and nested value resolution."""

import json
from typing import Any, List, Mapping, Optional

import numpy as np
import pandas as pd
import polars as pl


def normalize_rows(data: Any) -> List[Any]:
    """
    Coerce an arbitrary input value into a list of rows.

    Lists and tuples are taken as row sequences. Polars DataFrames/LazyFrames
    and pandas DataFrames are converted to row dicts. Every other value
    (None, strings, mappings, generators, scalars) yields an empty list.

    Args:
        data: Value supplied by the caller as table data

    Returns:
        List of rows (never raises)
    """
    if isinstance(data, (list, tuple)):
        return list(data)
    if isinstance(data, pl.LazyFrame):
        return data.collect().to_dicts()
    if isinstance(data, pl.DataFrame):
        return data.to_dicts()
    if isinstance(data, pd.DataFrame):
        return data.to_dict(orient="records")
    return []


def resolve_path(row: Any, path: Optional[str]) -> Any:
    """
    Follow a dot-separated path into a row.

    Mapping segments are looked up by key; integer segments index into
    lists and tuples. Any miss along the way resolves to None.

    Args:
        row: The row (usually a mapping)
        path: Dot-separated path, e.g. "profile.firstName"

    Returns:
        The resolved value, or None if absent
    """
    if path is None:
        return None

    current = row
    for segment in path.split("."):
        if current is None:
            return None
        if isinstance(current, Mapping):
            current = current.get(segment)
        elif isinstance(current, (list, tuple)) and segment.lstrip("-").isdigit():
            index = int(segment)
            if -len(current) <= index < len(current):
                current = current[index]
            else:
                return None
        else:
            return None
    return current


def is_missing(value: Any) -> bool:
    """True for None and NaN (python or numpy floats)."""
    if value is None:
        return True
    if isinstance(value, (float, np.floating)):
        return bool(np.isnan(value))
    return False


def stringify(value: Any) -> str:
    """
    Turn a resolved value into text for matching and export.

    Absent values become "", booleans lower-case, integral floats drop
    their ".0", sequences join with "," and mappings dump as sorted JSON.
    """
    if is_missing(value):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (float, np.floating)):
        value = float(value)
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)
