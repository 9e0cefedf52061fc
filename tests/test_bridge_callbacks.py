"""Tests for the Streamlit bridge: widget callbacks and the render pass.

Note: The mock_streamlit fixture is defined in conftest.py
"""

from unittest.mock import MagicMock, patch

import pytest
from streamlit.testing.v1 import AppTest

from sms_tables import EnhancedTable
from sms_tables.core.state import StateManager
from sms_tables.rendering import bridge


@pytest.fixture
def table(numbered_rows):
    return EnhancedTable(
        data=numbered_rows,
        columns=[{"key": "name", "label": "Name"}, {"key": "group", "label": "Group"}],
        title="Numbers",
        page_size=5,
        filterable=True,
        selectable=True,
        bulk_actions=[{"label": "Archive", "on_click": lambda ids: None}],
    )


class TestWidgetCallbacks:
    """Callbacks read widget values from session_state and update table state."""

    def test_search_change(self, mock_streamlit, table):
        manager = StateManager()
        state = manager.get_table_state("t", table.column_keys)
        state.current_page = 3
        mock_streamlit["t_search"] = "row_1"

        bridge._on_search_change(table, state, manager, "t_search")

        assert state.search_term == "row_1"
        assert state.current_page == 1
        assert manager.counter == 2

    def test_filter_change(self, mock_streamlit, table):
        manager = StateManager()
        state = manager.get_table_state("t", table.column_keys)
        mock_streamlit["t_filter_group"] = "odd"

        bridge._on_filter_change(table, state, manager, "group", "t_filter_group")

        assert state.filters == {"group": "odd"}
        assert len(table.query(state)) == 12

    def test_search_column_change(self, mock_streamlit, numbered_rows):
        table = EnhancedTable(
            data=numbered_rows,
            columns=[{"key": "name"}, {"key": "group"}],
            column_filter_mode="columnChecklist",
        )
        manager = StateManager()
        state = manager.get_table_state("t", table.column_keys)
        mock_streamlit["t_search_col_group"] = False

        bridge._on_search_column_change(
            table, state, manager, "group", "t_search_col_group"
        )

        assert state.selected_search_columns == ["name"]

    def test_clear_filters_resets_widgets(self, mock_streamlit, table):
        manager = StateManager()
        state = manager.get_table_state("t", table.column_keys)
        table.set_search_term(state, "row")
        table.set_filter(state, "group", "odd")
        mock_streamlit["t_search"] = "row"
        mock_streamlit["t_filter_group"] = "odd"

        bridge._on_clear_filters(table, state, manager, "t")

        assert not state.has_active_filters
        assert mock_streamlit["t_search"] == ""
        assert mock_streamlit["t_filter_group"] == ""
        assert mock_streamlit["t_search_col_name"] is True

    def test_sort_and_page(self, mock_streamlit, table):
        manager = StateManager()
        state = manager.get_table_state("t", table.column_keys)

        bridge._on_sort(table, state, manager, "name")
        bridge._on_sort(table, state, manager, "name")
        bridge._on_page(table, state, manager, 9)

        assert (state.sort_key, state.sort_direction) == ("name", "desc")
        assert state.current_page == 5

    def test_row_toggle_and_select_all(self, mock_streamlit, table, numbered_rows):
        manager = StateManager()
        state = manager.get_table_state("t", table.column_keys)

        bridge._on_row_toggle(table, state, manager, numbered_rows[0])
        bridge._on_select_all(table, state, manager)

        assert table.selection(state).selected_ids() == [1, 2, 3, 4, 5]

    def test_bulk_action(self, mock_streamlit, numbered_rows):
        received = []
        table = EnhancedTable(
            data=numbered_rows,
            columns=[{"key": "name"}],
            selectable=True,
            bulk_actions=[{"label": "Archive", "on_click": received.append}],
        )
        manager = StateManager()
        state = manager.get_table_state("t", table.column_keys)
        table.toggle_row(state, numbered_rows[4])

        bridge._on_bulk_action(table, state, 0)

        assert received == [[5]]


def _fake_columns(spec, *args, **kwargs):
    count = spec if isinstance(spec, int) else len(spec)
    return [MagicMock() for _ in range(count)]


@pytest.fixture
def fake_st(mock_streamlit):
    """Replace the bridge's Streamlit module with a recording mock."""
    fake = MagicMock()
    fake.session_state = mock_streamlit
    fake.columns.side_effect = _fake_columns
    with patch.object(bridge, "st", fake):
        yield fake


class TestRenderTable:
    def test_mounts_state_and_syncs_widgets(self, fake_st, table, numbered_rows):
        manager = StateManager()
        state = table(key="numbers", state_manager=manager)

        assert manager.has_table_state("numbers")
        assert state is manager.get_table_state("numbers")
        assert fake_st.session_state["numbers_search"] == ""
        assert fake_st.session_state["numbers_select_all"] is False
        assert fake_st.session_state["numbers_row_1_0"] is False

    def test_page_correction_persists(self, fake_st, table):
        manager = StateManager()
        state = manager.get_table_state("numbers", table.column_keys)
        state.current_page = 9

        table(key="numbers", state_manager=manager)

        assert manager.get_table_state("numbers").current_page == 5

    def test_empty_message(self, fake_st):
        table = EnhancedTable(data=[], columns=[{"key": "name"}], empty_message="No students")
        table(key="empty", state_manager=StateManager())
        fake_st.info.assert_called_with("No students")

    def test_loading(self, fake_st):
        loading = EnhancedTable(data=[], columns=[{"key": "name"}], loading=True)
        loading(key="loading", state_manager=StateManager())
        fake_st.info.assert_called_with("Loading...")

    def test_default_key_is_stable(self, fake_st, table):
        manager = StateManager()
        first = table(state_manager=manager)
        second = table(state_manager=manager)
        assert first is second

    def test_duplicate_rows_get_distinct_checkbox_keys(self, fake_st):
        table = EnhancedTable(
            data=[{"name": "Ann"}, {"name": "Ann"}],
            columns=[{"key": "name"}],
            selectable=True,
        )
        table(key="t", state_manager=StateManager())

        assert "t_row_1_0" in fake_st.session_state
        assert "t_row_1_1" in fake_st.session_state

    def test_clear_button_without_search_box(self, fake_st, numbered_rows):
        table = EnhancedTable(
            data=numbered_rows,
            columns=[{"key": "name"}],
            searchable=False,
            filterable=True,
        )
        manager = StateManager()
        state = manager.get_table_state("t", table.column_keys)
        state.filters = {"name": "row_0"}

        table(key="t", state_manager=manager)

        labels = [call.args[0] for call in fake_st.button.call_args_list]
        assert "Clear" in labels

    def test_no_clear_button_without_active_filters(self, fake_st, numbered_rows):
        table = EnhancedTable(
            data=numbered_rows,
            columns=[{"key": "name"}],
            searchable=False,
            filterable=True,
        )
        table(key="t", state_manager=StateManager())

        labels = [call.args[0] for call in fake_st.button.call_args_list]
        assert "Clear" not in labels


def _duplicate_rows_app():
    from sms_tables import EnhancedTable

    EnhancedTable(
        data=[{"name": "Ann"}, {"name": "Ann"}],
        columns=[{"key": "name"}],
        selectable=True,
    )(key="t")


class TestAppRender:
    """Full Streamlit script runs of a table."""

    def test_duplicate_unkeyed_rows_render_and_select(self):
        app = AppTest.from_function(_duplicate_rows_app, default_timeout=30)
        app.run()
        assert not app.exception

        app.checkbox(key="t_row_1_1").check().run()
        assert not app.exception
        # Identical rows share one identity key, so both show as selected
        assert app.checkbox(key="t_row_1_0").value is True
        assert app.checkbox(key="t_row_1_1").value is True
