"""Per-cell rendering with failure isolation."""

import json
import os
import sys
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional

from ..core.descriptors import Column
from ..preprocessing.normalize import is_missing, resolve_path

# Candidate fields used to label a mapping, in order of preference
_LABEL_FIELDS = ("name", "title", "label", "username", "code")

# Number of faults kept for retrieval per table
MAX_RECORDED_FAULTS = 100


def to_label(value: Any) -> str:
    """
    Turn any value into a readable label.

    Strings pass through, lists join the labels of their items, mappings
    prefer a name/title/label/username/code field and then fall back to an
    identifier or their JSON form. None and NaN are empty.
    """
    if is_missing(value):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(label for label in (to_label(item) for item in value) if label)
    if isinstance(value, Mapping):
        for field_name in _LABEL_FIELDS:
            candidate = value.get(field_name)
            if isinstance(candidate, str) and candidate.strip():
                return candidate
            if isinstance(candidate, Mapping):
                for nested in ("name", "label"):
                    nested_value = candidate.get(nested)
                    if isinstance(nested_value, str) and nested_value.strip():
                        return nested_value
        for id_field in ("_id", "id"):
            if value.get(id_field) is not None:
                return str(value[id_field])
        try:
            return json.dumps(value, sort_keys=True, default=str)
        except (TypeError, ValueError):
            return str(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_display_text(value: Any) -> str:
    """Strings and numbers display as-is; everything else via to_label()."""
    if is_missing(value):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return to_label(value)


@dataclass
class CellFault:
    """A failure raised while rendering one cell."""

    column_key: str
    row: Any
    error: BaseException

    def __str__(self) -> str:
        return (
            f"column '{self.column_key}': "
            f"{type(self.error).__name__}: {self.error}"
        )


class CellDiagnostics:
    """
    Diagnostics channel for cell faults.

    Keeps the most recent faults for retrieval, forwards each one to an
    optional callback and writes a tagged line to stderr unless the
    SMS_TABLES_QUIET environment variable is "true".
    """

    def __init__(
        self,
        on_fault: Optional[Callable[[CellFault], Any]] = None,
        max_faults: int = MAX_RECORDED_FAULTS,
    ):
        self._on_fault = on_fault
        self._max_faults = max_faults
        self._faults: List[CellFault] = []

    @property
    def faults(self) -> List[CellFault]:
        return list(self._faults)

    @property
    def last(self) -> Optional[CellFault]:
        return self._faults[-1] if self._faults else None

    def record(self, fault: CellFault) -> None:
        self._faults.append(fault)
        if len(self._faults) > self._max_faults:
            del self._faults[0]

        if os.environ.get("SMS_TABLES_QUIET", "false").lower() != "true":
            print(f"[TABLE] Cell render failed, {fault}", file=sys.stderr)

        if self._on_fault is not None:
            self._on_fault(fault)

    def clear(self) -> None:
        self._faults = []

    def __len__(self) -> int:
        return len(self._faults)


@dataclass
class RenderedCell:
    """Display text of one cell.

    Attributes:
        key: Column key
        text: Main cell text
        subtext: Secondary line, or None
        failed: True when the fallback label replaced a failed render
    """

    key: str
    text: str
    subtext: Optional[str] = None
    failed: bool = False


def render_cell(
    column: Column, row: Any, diagnostics: Optional[CellDiagnostics] = None
) -> RenderedCell:
    """
    Render one cell inside its own isolation boundary.

    If the column's render or subtext function raises, the error is recorded
    on the diagnostics channel and the cell shows to_label() of the raw value.
    Sibling cells are unaffected.

    Args:
        column: Column descriptor
        row: The row being rendered
        diagnostics: Where faults are recorded

    Returns:
        RenderedCell with display text
    """
    value = resolve_path(row, column.key)
    try:
        if column.render is not None:
            text = _as_display_text(column.render(value, row))
        else:
            text = to_label(value)

        subtext = None
        if column.subtext is not None:
            if callable(column.subtext):
                sub_value = column.subtext(row)
            else:
                sub_value = resolve_path(row, column.subtext)
            subtext = _as_display_text(sub_value)
    except Exception as e:
        if diagnostics is not None:
            diagnostics.record(CellFault(column_key=column.key, row=row, error=e))
        return RenderedCell(key=column.key, text=to_label(value), failed=True)

    return RenderedCell(key=column.key, text=text, subtext=subtext)
