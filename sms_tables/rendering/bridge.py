"""Bridge between table components and Streamlit widgets."""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import streamlit as st

from ..core.state import TableState
from .export import CSV_MIME_TYPE

if TYPE_CHECKING:
    from ..components.table import EnhancedTable, RenderedRow
    from ..core.state import StateManager

# Header sort indicators
_SORT_ICONS = {"asc": "▲", "desc": "▼", None: "↕"}

# Relative widths of the fixed grid columns
_CHECKBOX_WIDTH = 0.5
_CELL_WIDTH = 3
_ACTIONS_WIDTH = 2
_OPEN_WIDTH = 0.7


def _widget_key(key: str, *parts: Any) -> str:
    """Build a unique Streamlit widget key under a table key."""
    return "_".join([key, *(str(part) for part in parts)])


# =============================================================================
# Widget callbacks
# =============================================================================
# Streamlit runs these before the rerun, so the pipeline always recomputes
# from the updated state.


def _on_search_change(component, state, state_manager, widget_key) -> None:
    component.set_search_term(state, st.session_state.get(widget_key, ""))
    state_manager.mark_changed()


def _on_filter_change(component, state, state_manager, column_key, widget_key) -> None:
    component.set_filter(state, column_key, st.session_state.get(widget_key, ""))
    state_manager.mark_changed()


def _on_search_column_change(
    component, state, state_manager, column_key, widget_key
) -> None:
    component.set_search_column(
        state, column_key, bool(st.session_state.get(widget_key, False))
    )
    state_manager.mark_changed()


def _on_clear_filters(component, state, state_manager, key) -> None:
    component.clear_filters(state)
    # Reset the input widgets so they show the cleared state
    st.session_state[_widget_key(key, "search")] = ""
    for column in component.columns:
        st.session_state[_widget_key(key, "filter", column.key)] = ""
        st.session_state[_widget_key(key, "search_col", column.key)] = True
    state_manager.mark_changed()


def _on_sort(component, state, state_manager, column_key) -> None:
    component.handle_sort(state, column_key)
    state_manager.mark_changed()


def _on_page(component, state, state_manager, page) -> None:
    component.go_to_page(state, page)
    state_manager.mark_changed()


def _on_row_toggle(component, state, state_manager, row) -> None:
    component.toggle_row(state, row)
    state_manager.mark_changed()


def _on_select_all(component, state, state_manager) -> None:
    component.toggle_select_all(state)
    state_manager.mark_changed()


def _on_bulk_action(component, state, index) -> None:
    component.run_bulk_action(state, index)


def _on_action(component, action, row) -> None:
    component.run_action(action, row)


def _on_row_click(component, row) -> None:
    component.click_row(row)


# =============================================================================
# Sections
# =============================================================================


def _render_header(component, state, key) -> None:
    args = component._get_component_args()
    title_col, export_col = st.columns([4, 1])
    title_col.subheader(args["title"])
    if args["exportable"] and not args["loading"]:
        export_col.download_button(
            "Export CSV",
            data=component.export_csv(state),
            file_name=component.export_filename(),
            mime=CSV_MIME_TYPE,
            key=_widget_key(key, "export"),
            icon=":material/download:",
        )


def _render_search_and_filters(component, state, state_manager, key) -> None:
    args = component._get_component_args()

    # Without a search box the clear button sits on its own line
    clear_col = st
    if args["searchable"]:
        search_key = _widget_key(key, "search")
        if search_key not in st.session_state:
            st.session_state[search_key] = state.search_term
        search_col, clear_col = st.columns([5, 1])
        search_col.text_input(
            "Search",
            key=search_key,
            placeholder="Search...",
            label_visibility="collapsed",
            on_change=_on_search_change,
            args=(component, state, state_manager, search_key),
        )

    if (args["searchable"] or args["filterable"]) and state.has_active_filters:
        clear_col.button(
            "Clear",
            key=_widget_key(key, "clear"),
            on_click=_on_clear_filters,
            args=(component, state, state_manager, key),
        )

    if not args["filterable"]:
        return

    if args["columnFilterMode"] == "multiField":
        filter_columns = component.filterable_columns()
        if filter_columns:
            cols = st.columns(len(filter_columns))
            for col, column in zip(cols, filter_columns):
                filter_key = _widget_key(key, "filter", column.key)
                if filter_key not in st.session_state:
                    st.session_state[filter_key] = state.filters.get(column.key, "")
                col.text_input(
                    f"Filter {column.title}",
                    key=filter_key,
                    placeholder=f"Filter {column.title}...",
                    label_visibility="collapsed",
                    on_change=_on_filter_change,
                    args=(component, state, state_manager, column.key, filter_key),
                )
    elif args["columnFilterMode"] == "columnChecklist":
        st.caption("Search in columns:")
        cols = st.columns(max(1, len(component.columns)))
        for col, column in zip(cols, component.columns):
            check_key = _widget_key(key, "search_col", column.key)
            st.session_state[check_key] = column.key in state.selected_search_columns
            col.checkbox(
                column.title,
                key=check_key,
                on_change=_on_search_column_change,
                args=(component, state, state_manager, column.key, check_key),
            )
        if not state.selected_search_columns:
            st.error("Select at least one column to search.")


def _render_bulk_actions(component, state, key) -> None:
    if not component.show_bulk_actions(state):
        return
    count = len(state.selected_row_ids)
    bulk_actions = component.bulk_actions
    cols = st.columns([3] + [1] * len(bulk_actions))
    cols[0].caption(f"{count} item{'s' if count != 1 else ''} selected")
    for index, (col, action) in enumerate(zip(cols[1:], bulk_actions)):
        col.button(
            action.label,
            key=_widget_key(key, "bulk", index),
            on_click=_on_bulk_action,
            args=(component, state, index),
            type="primary" if not action.class_name else "secondary",
        )


def _grid_spec(component) -> List[float]:
    spec: List[float] = []
    if component.selectable:
        spec.append(_CHECKBOX_WIDTH)
    spec.extend([_CELL_WIDTH] * len(component.columns))
    if component.has_actions:
        spec.append(_ACTIONS_WIDTH)
    if component._get_component_args()["hasRowClick"]:
        spec.append(_OPEN_WIDTH)
    return spec


def _render_column_headers(component, state, state_manager, key, view) -> None:
    cols = iter(st.columns(_grid_spec(component)))

    if component.selectable:
        select_key = _widget_key(key, "select_all")
        st.session_state[select_key] = view["_selection"]["all_selected"]
        next(cols).checkbox(
            "Select all",
            key=select_key,
            label_visibility="collapsed",
            on_change=_on_select_all,
            args=(component, state, state_manager),
        )

    for column in component.columns:
        col = next(cols)
        if component.is_sortable(column.key):
            direction = state.sort_direction if state.sort_key == column.key else None
            col.button(
                f"{column.title} {_SORT_ICONS[direction]}",
                key=_widget_key(key, "sort", column.key),
                on_click=_on_sort,
                args=(component, state, state_manager, column.key),
            )
        else:
            col.markdown(f"**{column.title}**")

    if component.has_actions:
        next(cols).markdown("**Actions**")


def _render_row(
    component, state, state_manager, key, position: int, item: "RenderedRow"
) -> None:
    cols = iter(st.columns(_grid_spec(component)))

    if component.selectable:
        check_key = _widget_key(key, "row", state.current_page, position)
        st.session_state[check_key] = item.selected
        next(cols).checkbox(
            "Select row",
            key=check_key,
            label_visibility="collapsed",
            on_change=_on_row_toggle,
            args=(component, state, state_manager, item.row),
        )

    for cell in item.cells:
        col = next(cols)
        col.text(cell.text)
        if cell.subtext:
            col.caption(cell.subtext)

    if component.has_actions:
        col = next(cols)
        for index, resolved in enumerate(item.actions):
            col.button(
                resolved.action.label,
                key=_widget_key(key, "action", position, index),
                icon=resolved.icon,
                disabled=resolved.disabled,
                help=resolved.action.label,
                on_click=_on_action,
                args=(component, resolved.action, item.row),
            )

    if component._get_component_args()["hasRowClick"]:
        next(cols).button(
            "Open",
            key=_widget_key(key, "open", position),
            on_click=_on_row_click,
            args=(component, item.row),
        )


def _render_pagination(component, state, state_manager, key, meta: Dict[str, Any]) -> None:
    if not component._get_component_args()["paginated"] or meta["total_pages"] <= 1:
        return

    window = meta["window"]
    cols = st.columns([4, 1] + [0.6] * len(window) + [1])
    cols[0].caption(meta["summary"])
    cols[1].button(
        "Previous",
        key=_widget_key(key, "prev"),
        disabled=not meta["has_previous"],
        on_click=_on_page,
        args=(component, state, state_manager, state.current_page - 1),
    )
    for col, page in zip(cols[2:-1], window):
        col.button(
            str(page),
            key=_widget_key(key, "page", page),
            type="primary" if page == meta["page"] else "secondary",
            on_click=_on_page,
            args=(component, state, state_manager, page),
        )
    cols[-1].button(
        "Next",
        key=_widget_key(key, "next"),
        disabled=not meta["has_next"],
        on_click=_on_page,
        args=(component, state, state_manager, state.current_page + 1),
    )


def render_table(
    component: "EnhancedTable",
    state_manager: "StateManager",
    key: Optional[str] = None,
) -> TableState:
    """
    Render a table component in Streamlit.

    This function:
    1. Gets (or mounts) the table's state from the StateManager
    2. Runs the query pipeline via component._prepare_view_data()
    3. Draws header, search, filters, bulk bar, rows and pagination
    4. Wires every widget to the matching engine operation

    Args:
        component: The table to render
        state_manager: StateManager holding table states
        key: Optional unique key for the table instance

    Returns:
        The table's TableState
    """
    # Generate a key if not provided (components are recreated each rerun)
    if key is None:
        key = f"smst_{component.title}_{hash(tuple(component.column_keys))}"

    state = state_manager.get_table_state(key, component.column_keys)

    _render_header(component, state, key)

    view = component._prepare_view_data(state)
    if view["loading"]:
        st.info("Loading...")
        return state

    _render_search_and_filters(component, state, state_manager, key)
    _render_bulk_actions(component, state, key)
    _render_column_headers(component, state, state_manager, key, view)

    if view["isEmpty"]:
        st.info(view["emptyMessage"])
    else:
        for position, item in enumerate(view["rows"]):
            _render_row(component, state, state_manager, key, position, item)

    _render_pagination(component, state, state_manager, key, view["_pagination"])

    return state
