"""Free-text search and per-column text filtering for table rows."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.registry import get_search_mode, register_search_mode
from .normalize import resolve_path, stringify


def _contains(value: Any, needle: str) -> bool:
    """Case-insensitive substring test on the stringified value."""
    return needle in stringify(value).casefold()


class SearchMode(ABC):
    """
    Decides which columns the free-text search looks at and whether
    per-column text filters take part in filtering.

    Exactly one mode is active per table, so either the per-column filters
    or the search column checklist is meaningful, never both.
    """

    name: str = ""
    uses_column_filters: bool = False
    uses_column_checklist: bool = False

    @abstractmethod
    def candidate_columns(
        self,
        column_keys: Sequence[str],
        selected_search_columns: Optional[Sequence[str]],
    ) -> List[str]:
        """Return the column paths the search term is matched against."""
        pass

    def apply_column_filters(
        self, rows: List[Any], filters: Optional[Dict[str, str]]
    ) -> List[Any]:
        """Apply per-column text filters (no-op unless the mode uses them)."""
        return rows


@register_search_mode("multiField")
class MultiFieldSearch(SearchMode):
    """Search every column, plus one text filter input per filterable column."""

    uses_column_filters = True

    def candidate_columns(self, column_keys, selected_search_columns):
        return list(column_keys)

    def apply_column_filters(self, rows, filters):
        for path, filter_value in (filters or {}).items():
            if not filter_value:
                continue
            needle = str(filter_value).casefold()
            rows = [row for row in rows if _contains(resolve_path(row, path), needle)]
        return rows


@register_search_mode("columnChecklist")
class ColumnChecklistSearch(SearchMode):
    """Restrict the search to the columns ticked in a checklist."""

    uses_column_checklist = True

    def candidate_columns(self, column_keys, selected_search_columns):
        return list(selected_search_columns or [])


def search_rows(rows: Iterable[Any], paths: Sequence[str], search_term: str) -> List[Any]:
    """
    Keep rows where any of the given paths contains the search term.

    Args:
        rows: Rows to search
        paths: Candidate column paths
        search_term: Text to look for (case-insensitive)

    Returns:
        Matching rows in input order
    """
    rows = list(rows)
    if not search_term:
        return rows
    needle = search_term.casefold()
    return [
        row
        for row in rows
        if any(_contains(resolve_path(row, path), needle) for path in paths)
    ]


def filter_rows(
    rows: Iterable[Any],
    column_keys: Sequence[str],
    search_term: str = "",
    filters: Optional[Dict[str, str]] = None,
    search_mode: str = "multiField",
    selected_search_columns: Optional[Sequence[str]] = None,
) -> List[Any]:
    """
    Run the filter stage: free-text search, then per-column filters.

    Args:
        rows: Normalized rows
        column_keys: Keys of all table columns, in display order
        search_term: Free-text search term ("" disables the search)
        filters: Mapping of column path to filter text (multiField mode only)
        search_mode: Registered search mode name
        selected_search_columns: Checklist-selected paths (columnChecklist mode)

    Returns:
        Filtered rows in input order

    Raises:
        KeyError: If search_mode is not registered
    """
    mode = get_search_mode(search_mode)()
    paths = mode.candidate_columns(column_keys, selected_search_columns)
    filtered = search_rows(rows, paths, search_term)
    return mode.apply_column_filters(filtered, filters)
