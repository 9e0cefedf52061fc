"""Admin list table with search, filters, sorting, paging, selection and export."""

import datetime
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import pandas as pd

from ..core.base import BaseComponent
from ..core.descriptors import (
    Action,
    BulkAction,
    Column,
    as_action_source,
    as_bulk_action,
)
from ..core.registry import get_search_mode
from ..core.selection import SELECT_ALL_PAGE, SelectionService, row_identity
from ..core.state import TableState
from ..preprocessing.filtering import filter_rows
from ..preprocessing.pagination import (
    clamp_page,
    paginate,
    pagination_metadata,
    total_pages,
)
from ..preprocessing.sorting import next_sort, sort_rows
from ..rendering.cells import CellDiagnostics, CellFault, RenderedCell, render_cell
from ..rendering.export import build_csv, export_filename


@dataclass
class ResolvedAction:
    """An action as it applies to one row."""

    action: Action
    disabled: bool
    icon: Optional[str] = None


@dataclass
class RenderedRow:
    """One row of the current page, ready for display.

    Attributes:
        row: The original row
        key: Identity key of the row
        cells: Rendered cells in column order
        actions: Visible actions for this row
        selected: Whether the row is in the selection
    """

    row: Any
    key: Any
    cells: List[RenderedCell] = field(default_factory=list)
    actions: List[ResolvedAction] = field(default_factory=list)
    selected: bool = False


class EnhancedTable(BaseComponent):
    """
    Generic table used by every admin list screen.

    Features:
    - Free-text search over all columns or a checklist of columns
    - Per-column text filters (multiField mode)
    - Single-column sorting with header toggling, over nested paths
    - Pagination with a self-correcting current page
    - Identity-based multi-row selection with bulk actions
    - Per-row actions, static or computed from the row
    - Per-cell render isolation with a diagnostics channel
    - CSV export of the filtered and sorted rows

    Example:
        students = EnhancedTable(
            data=student_rows,
            title="Students",
            columns=[
                {"key": "profile.firstName", "label": "First name"},
                {"key": "class.name", "label": "Class"},
                {"key": "age", "label": "Age", "filterable": False},
            ],
            actions=[{"label": "Edit", "on_click": open_editor}],
            bulk_actions=[{"label": "Delete", "on_click": delete_students}],
            selectable=True,
            page_size=25,
        )
        students(key="students_table")
    """

    _component_type: str = "table"

    def __init__(
        self,
        data: Any = None,
        columns: Optional[Sequence[Union[Column, Dict[str, Any]]]] = None,
        title: str = "Data Table",
        searchable: bool = True,
        sortable: bool = True,
        filterable: bool = False,
        paginated: bool = True,
        exportable: bool = True,
        selectable: bool = False,
        actions: Any = None,
        bulk_actions: Optional[Sequence[Union[BulkAction, Dict[str, Any]]]] = None,
        page_size: int = 25,
        column_filter_mode: str = "multiField",
        select_all_scope: str = SELECT_ALL_PAGE,
        empty_message: str = "No data available",
        loading: bool = False,
        id_field: str = "id",
        on_row_click: Optional[Callable[[Any], Any]] = None,
        on_selection_change: Optional[Callable[[List[Any]], Any]] = None,
        on_cell_error: Optional[Callable[[CellFault], Any]] = None,
        **kwargs,
    ):
        """
        Initialize the EnhancedTable component.

        Args:
            data: Rows (list of mappings, or a polars/pandas frame)
            columns: Column descriptors, see Column
            title: Title shown above the table, also used for export file names
            searchable: Show the free-text search box
            sortable: Allow sorting by clicking column headers
            filterable: Show per-column filters (multiField) or the search
                column checklist (columnChecklist)
            paginated: Slice rows into pages
            exportable: Offer CSV export
            selectable: Enable row selection checkboxes
            actions: List of actions, or a function row -> list of actions
            bulk_actions: Actions applied to the selected identifier list
            page_size: Rows per page (positive)
            column_filter_mode: 'multiField' or 'columnChecklist'
            select_all_scope: 'page' (select-all covers the current page) or
                'filtered' (covers every filtered row)
            empty_message: Text shown when the page has no rows
            loading: Show a loading placeholder instead of rows
            id_field: Row field holding the identity used for selection
            on_row_click: Called with the row when a row is opened
            on_selection_change: Called with the selected identifier list
            on_cell_error: Called with a CellFault when a cell render fails
            **kwargs: Additional configuration options

        Raises:
            ValueError: If page_size is not positive, column keys repeat or
                select_all_scope is unknown
            KeyError: If column_filter_mode is not a registered search mode
        """
        if not isinstance(page_size, int) or isinstance(page_size, bool) or page_size < 1:
            raise ValueError(f"page_size must be a positive integer, got {page_size!r}")

        self._search_mode = get_search_mode(column_filter_mode)()
        self._column_filter_mode = column_filter_mode
        self._title = title
        self._searchable = searchable
        self._sortable = sortable
        self._filterable = filterable
        self._paginated = paginated
        self._exportable = exportable
        self._selectable = selectable
        self._actions = as_action_source(actions)
        self._bulk_actions = [as_bulk_action(action) for action in bulk_actions or []]
        self._page_size = page_size
        self._select_all_scope = select_all_scope
        self._empty_message = empty_message
        self._loading = loading
        self._id_field = id_field
        self._on_row_click = on_row_click
        self._on_selection_change = on_selection_change
        self.diagnostics = CellDiagnostics(on_fault=on_cell_error)

        super().__init__(data=data, columns=columns, **kwargs)

        # Validate the scope eagerly rather than on first selection
        self.selection(self.new_state())

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def title(self) -> str:
        return self._title

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def selectable(self) -> bool:
        return self._selectable

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def bulk_actions(self) -> List[BulkAction]:
        return list(self._bulk_actions)

    @property
    def has_actions(self) -> bool:
        return bool(self._actions)

    @property
    def search_mode(self) -> str:
        return self._column_filter_mode

    def filterable_columns(self) -> List[Column]:
        """Columns offered a per-column filter input."""
        return [column for column in self._columns if column.filterable]

    def is_sortable(self, key: str) -> bool:
        """Whether clicking the header of `key` sorts."""
        column = self.get_column(key)
        return self._sortable and column is not None and column.sortable

    # ------------------------------------------------------------------
    # Query pipeline
    # ------------------------------------------------------------------

    def filtered_rows(self, state: TableState) -> List[Any]:
        """Rows after the search and per-column filters."""
        return filter_rows(
            self._rows,
            self.column_keys,
            search_term=state.search_term if self._searchable else "",
            filters=state.filters,
            search_mode=self._column_filter_mode,
            selected_search_columns=state.selected_search_columns,
        )

    def query(self, state: TableState) -> List[Any]:
        """Filtered and sorted rows (all pages)."""
        sort_key = state.sort_key if self._sortable else None
        return sort_rows(self.filtered_rows(state), sort_key, state.sort_direction)

    def total_pages(self, state: TableState) -> int:
        if not self._paginated:
            return 1
        return total_pages(len(self.query(state)), self._page_size)

    def page_rows(self, state: TableState, rows: Optional[List[Any]] = None) -> List[Any]:
        """
        Rows of the current page.

        The current page is clamped to the available pages first and the
        corrected value is written back to the state.
        """
        if rows is None:
            rows = self.query(state)
        if self._paginated:
            state.current_page = clamp_page(
                state.current_page, total_pages(len(rows), self._page_size)
            )
        return paginate(rows, state.current_page, self._page_size, self._paginated)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def set_search_term(self, state: TableState, term: Optional[str]) -> None:
        """Change the search term and go back to the first page."""
        state.search_term = term or ""
        state.current_page = 1

    def set_filter(self, state: TableState, key: str, value: Optional[str]) -> None:
        """Set one per-column filter (multiField mode) and go to the first page."""
        if not self._search_mode.uses_column_filters:
            return
        state.filters = {**state.filters, key: value or ""}
        state.current_page = 1

    def set_search_column(self, state: TableState, key: str, checked: bool) -> None:
        """Tick or untick a column in the search checklist (columnChecklist mode)."""
        if not self._search_mode.uses_column_checklist:
            return
        columns = [k for k in state.selected_search_columns if k != key]
        if checked:
            columns.append(key)
        state.selected_search_columns = columns
        state.current_page = 1

    def handle_sort(self, state: TableState, key: str) -> None:
        """Header click: same column flips direction, another column sorts ascending."""
        if not self.is_sortable(key):
            return
        state.sort_key, state.sort_direction = next_sort(
            state.sort_key, state.sort_direction, key
        )

    def clear_filters(self, state: TableState) -> None:
        """Reset search, filters and the search checklist. Selection is kept."""
        state.clear_filters(self.column_keys)

    def go_to_page(self, state: TableState, page: int) -> int:
        """Move to a page, clamped to the available pages."""
        state.current_page = clamp_page(page, self.total_pages(state))
        return state.current_page

    def next_page(self, state: TableState) -> int:
        return self.go_to_page(state, state.current_page + 1)

    def previous_page(self, state: TableState) -> int:
        return self.go_to_page(state, state.current_page - 1)

    # ------------------------------------------------------------------
    # Selection and actions
    # ------------------------------------------------------------------

    def selection(self, state: TableState) -> SelectionService:
        return SelectionService(
            state,
            selectable=self._selectable,
            on_change=self._on_selection_change,
            scope=self._select_all_scope,
            id_field=self._id_field,
        )

    def row_key(self, row: Any) -> Any:
        return row_identity(row, self._id_field)

    def toggle_row(self, state: TableState, row: Any) -> bool:
        return self.selection(state).toggle(row)

    def toggle_select_all(self, state: TableState) -> bool:
        rows = self.query(state)
        return self.selection(state).toggle_all(self.page_rows(state, rows), rows)

    def show_bulk_actions(self, state: TableState) -> bool:
        """The bulk bar appears when rows are selected and bulk actions exist."""
        return (
            self._selectable
            and bool(self._bulk_actions)
            and bool(state.selected_row_ids)
        )

    def run_bulk_action(self, state: TableState, action: Union[int, str]) -> Any:
        """
        Run a bulk action with the selected identifiers.

        The selection is left as is; clearing it is up to the handler.

        Args:
            state: Table state
            action: Index or label of the bulk action

        Raises:
            KeyError: If no bulk action matches
        """
        bulk_action = self._find_bulk_action(action)
        return bulk_action.on_click(self.selection(state).selected_ids())

    def _find_bulk_action(self, action: Union[int, str]) -> BulkAction:
        if isinstance(action, int):
            if 0 <= action < len(self._bulk_actions):
                return self._bulk_actions[action]
        else:
            for bulk_action in self._bulk_actions:
                if bulk_action.label == action:
                    return bulk_action
        available = [bulk_action.label for bulk_action in self._bulk_actions]
        raise KeyError(f"No bulk action '{action}'. Available bulk actions: {available}")

    def resolve_actions(self, row: Any) -> List[ResolvedAction]:
        """Visible actions for a row, with their disabled state."""
        return [
            ResolvedAction(
                action=action,
                disabled=action.is_disabled(row),
                icon=action.resolved_icon(),
            )
            for action in self._actions.resolve(row)
            if not action.is_hidden(row)
        ]

    def run_action(self, action: Action, row: Any) -> bool:
        """
        Invoke an action for a row unless it is disabled or hidden.

        Returns:
            True if the handler was called
        """
        if action.is_hidden(row) or action.is_disabled(row):
            return False
        action.on_click(row)
        return True

    def click_row(self, row: Any) -> bool:
        """Forward a row click to on_row_click, if configured."""
        if self._on_row_click is None:
            return False
        self._on_row_click(row)
        return True

    # ------------------------------------------------------------------
    # Rendering and export
    # ------------------------------------------------------------------

    def render_row(self, state: TableState, row: Any) -> RenderedRow:
        """Render every cell of a row, each inside its own boundary."""
        return RenderedRow(
            row=row,
            key=self.row_key(row),
            cells=[render_cell(column, row, self.diagnostics) for column in self._columns],
            actions=self.resolve_actions(row),
            selected=self._selectable and self.selection(state).is_selected(row),
        )

    def export_csv(self, state: TableState) -> str:
        """CSV of the filtered and sorted rows, independent of the page."""
        return build_csv(self.query(state), self._columns)

    def export_filename(self, today: Optional[datetime.date] = None) -> str:
        return export_filename(self._title, today)

    def _get_data_key(self) -> str:
        """Return the key used for the rendered page."""
        return "tableData"

    def _prepare_view_data(self, state: TableState) -> Dict[str, Any]:
        """
        Run Normalize -> Filter -> Sort -> Page and render the page.

        The current page is corrected in place when the result shrank.

        Args:
            state: The table's query state

        Returns:
            Dict with tableData (pandas DataFrame of display text keyed by
            column key), rows (RenderedRow list), _pagination metadata,
            _selection info and the empty message
        """
        if self._loading:
            return {"loading": True, "tableData": pd.DataFrame(), "rows": []}

        rows = self.query(state)
        page = self.page_rows(state, rows)
        rendered = [self.render_row(state, row) for row in page]

        table_data = pd.DataFrame(
            [{cell.key: cell.text for cell in item.cells} for item in rendered],
            columns=self.column_keys,
        )

        selection = self.selection(state)
        return {
            "loading": False,
            self._get_data_key(): table_data,
            "rows": rendered,
            "_pagination": pagination_metadata(
                len(rows), state.current_page, self._page_size, self._paginated
            ),
            "_selection": {
                "count": selection.count,
                "page_all_selected": selection.all_selected(page),
                "filtered_all_selected": selection.all_selected(rows),
                "all_selected": selection.all_selected(
                    page if selection.scope == SELECT_ALL_PAGE else rows
                ),
                "show_bulk_actions": self.show_bulk_actions(state),
            },
            "isEmpty": not rendered,
            "emptyMessage": self._empty_message,
        }

    def _get_component_args(self) -> Dict[str, Any]:
        """
        Get component arguments used by the rendering bridge.

        Returns:
            Dict with all table configuration
        """
        args: Dict[str, Any] = {
            "componentType": self._component_type,
            "title": self._title,
            "columnDefinitions": [
                {
                    "key": column.key,
                    "label": column.title,
                    "sortable": self.is_sortable(column.key),
                    "filterable": column.filterable,
                }
                for column in self._columns
            ],
            "searchable": self._searchable,
            "sortable": self._sortable,
            "filterable": self._filterable,
            "columnFilterMode": self._column_filter_mode,
            "paginated": self._paginated,
            "pageSize": self._page_size,
            "exportable": self._exportable,
            "selectable": self._selectable,
            "selectAllScope": self._select_all_scope,
            "hasActions": self.has_actions,
            "hasRowClick": self._on_row_click is not None,
            "bulkActions": [action.label for action in self._bulk_actions],
            "emptyMessage": self._empty_message,
            "loading": self._loading,
        }

        # Add any extra config options
        args.update(self._config)

        return args
