"""Identity-keyed row selection."""

import hashlib
import json
from typing import Any, Callable, Hashable, List, Mapping, Optional, Sequence

from .state import TableState

SELECT_ALL_PAGE = "page"
SELECT_ALL_FILTERED = "filtered"
SELECT_ALL_SCOPES = (SELECT_ALL_PAGE, SELECT_ALL_FILTERED)


def row_identity(row: Any, id_field: str = "id") -> Hashable:
    """
    Stable identity key of a row.

    Uses row[id_field] when present, hashable and not None. Otherwise rows
    are keyed by a SHA256 digest of their sorted JSON form, so identical
    content maps to the same key across recomputations. Hashable scalars
    are their own key.

    Args:
        row: The row
        id_field: Name of the identifier field

    Returns:
        Hashable identity key
    """
    if isinstance(row, Mapping):
        row_id = row.get(id_field)
        # Unhashable ids (e.g. dict-shaped ids) fall through to the digest
        if row_id is not None and isinstance(row_id, Hashable):
            return row_id
    elif isinstance(row, (str, int, float, bool)) or row is None:
        return row

    content = json.dumps(row, sort_keys=True, default=str)
    return hashlib.sha256(content.encode()).hexdigest()


class SelectionService:
    """
    Set of selected rows kept in a TableState, independent of the filter,
    sort and page state. Every operation is a no-op when the table is not
    selectable.
    """

    def __init__(
        self,
        state: TableState,
        selectable: bool = True,
        on_change: Optional[Callable[[List[Any]], Any]] = None,
        scope: str = SELECT_ALL_PAGE,
        id_field: str = "id",
    ):
        if scope not in SELECT_ALL_SCOPES:
            raise ValueError(
                f"Select-all scope must be one of {SELECT_ALL_SCOPES}, got '{scope}'"
            )
        self._state = state
        self._selectable = selectable
        self._on_change = on_change
        self._scope = scope
        self._id_field = id_field

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def count(self) -> int:
        return len(self._state.selected_row_ids)

    def key(self, row: Any) -> Hashable:
        return row_identity(row, self._id_field)

    def selected_ids(self) -> List[Any]:
        """Selected identity keys in selection order."""
        return list(self._state.selected_row_ids)

    def is_selected(self, row: Any) -> bool:
        return self.key(row) in self._state.selected_row_ids

    def all_selected(self, rows: Sequence[Any]) -> bool:
        """True when rows is non-empty and every row is selected."""
        return bool(rows) and all(self.is_selected(row) for row in rows)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.selected_ids())

    def toggle(self, row: Any) -> bool:
        """
        Add or remove one row.

        Returns:
            True if the row is selected afterwards
        """
        if not self._selectable:
            return False
        key = self.key(row)
        selected = self._state.selected_row_ids
        if key in selected:
            del selected[key]
            now_selected = False
        else:
            selected[key] = None
            now_selected = True
        self._notify()
        return now_selected

    def toggle_all(self, page_rows: Sequence[Any], filtered_rows: Sequence[Any] = ()) -> bool:
        """
        Toggle the select-all checkbox.

        The rows in scope are the current page ("page" scope) or the whole
        filtered set ("filtered" scope). If all of them are selected they are
        removed from the selection, otherwise they are added to it. Rows
        outside the scope keep their selection.

        Returns:
            True if the rows in scope are selected afterwards
        """
        if not self._selectable:
            return False
        rows = filtered_rows if self._scope == SELECT_ALL_FILTERED else page_rows
        selected = self._state.selected_row_ids
        if self.all_selected(rows):
            for row in rows:
                selected.pop(self.key(row), None)
            now_selected = False
        else:
            for row in rows:
                selected[self.key(row)] = None
            now_selected = bool(rows)
        self._notify()
        return now_selected

    def clear(self) -> None:
        """Remove every selected key."""
        if not self._selectable:
            return
        self._state.selected_row_ids.clear()
        self._notify()
