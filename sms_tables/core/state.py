"""Per-table engine state and its Streamlit session storage."""

from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence

import numpy as np

# Module-level default state manager
_default_state_manager: Optional["StateManager"] = None


def get_default_state_manager() -> "StateManager":
    """
    Get or create the default shared StateManager.

    Returns:
        The default StateManager instance
    """
    global _default_state_manager
    if _default_state_manager is None:
        _default_state_manager = StateManager()
    return _default_state_manager


def reset_default_state_manager() -> None:
    """Reset the default state manager (useful for testing)."""
    global _default_state_manager
    _default_state_manager = None


class TableState:
    """
    Mutable query state of one table instance.

    Attributes:
        search_term: Free-text search term
        sort_key: Column path being sorted by, or None
        sort_direction: "asc" or "desc"
        filters: Per-column filter text (multiField mode only)
        selected_search_columns: Checklist-selected column paths
            (columnChecklist mode only)
        current_page: 1-based page number
        selected_row_ids: Insertion-ordered set of selected identity keys
    """

    def __init__(self, column_keys: Sequence[str] = ()):
        self.search_term: str = ""
        self.sort_key: Optional[str] = None
        self.sort_direction: str = "asc"
        self.filters: Dict[str, str] = {}
        self.selected_search_columns: List[str] = list(column_keys)
        self.current_page: int = 1
        # dict used as an ordered set
        self.selected_row_ids: Dict[Hashable, None] = {}

    def clear_filters(self, column_keys: Iterable[str]) -> None:
        """Reset search, filters, search columns and page. Selection is kept."""
        self.search_term = ""
        self.filters = {}
        self.selected_search_columns = list(column_keys)
        self.current_page = 1

    @property
    def has_active_filters(self) -> bool:
        """True when a search term or any per-column filter is set."""
        return bool(self.search_term) or any(self.filters.values())

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of the state as plain values."""
        return {
            "search_term": self.search_term,
            "sort_key": self.sort_key,
            "sort_direction": self.sort_direction,
            "filters": dict(self.filters),
            "selected_search_columns": list(self.selected_search_columns),
            "current_page": self.current_page,
            "selected_row_ids": list(self.selected_row_ids),
        }

    def __repr__(self) -> str:
        return f"TableState({self.to_dict()})"


class StateManager:
    """
    Keeps the TableState of every mounted table in Streamlit session_state.

    A table is mounted the first time its key is requested and gets fresh
    state; dropping the key unmounts it. The counter increases on every
    recorded change so callers can detect modifications between reruns.
    """

    def __init__(self, session_key: str = "sms_tables_state"):
        """
        Initialize the StateManager.

        Args:
            session_key: Key to use in Streamlit session_state for storing
                state. Use different keys for independent table groups.
        """
        self._session_key = session_key
        self._ensure_session_state()

    def _ensure_session_state(self) -> None:
        """Ensure session state is initialized."""
        import streamlit as st

        if self._session_key not in st.session_state:
            st.session_state[self._session_key] = {
                "counter": 0,
                "id": float(np.random.random()),
                "tables": {},
            }

    @property
    def _state(self) -> Dict[str, Any]:
        """Get the internal state dict from session_state."""
        import streamlit as st

        self._ensure_session_state()
        return st.session_state[self._session_key]

    @property
    def session_id(self) -> float:
        """Get the unique session ID."""
        return self._state["id"]

    @property
    def counter(self) -> int:
        """Get the current state counter."""
        return self._state["counter"]

    def has_table_state(self, table_key: str) -> bool:
        """Check whether a table is currently mounted."""
        return table_key in self._state["tables"]

    def get_table_state(
        self, table_key: str, column_keys: Sequence[str] = ()
    ) -> TableState:
        """
        Get the state of a table, creating fresh state on first use.

        Args:
            table_key: Unique key of the table instance
            column_keys: Column paths used to seed the search column checklist

        Returns:
            The table's TableState
        """
        tables = self._state["tables"]
        if table_key not in tables:
            tables[table_key] = TableState(column_keys)
            self._state["counter"] += 1
        return tables[table_key]

    def drop_table_state(self, table_key: str) -> bool:
        """
        Discard a table's state (unmount).

        Returns:
            True if state existed, False otherwise
        """
        if table_key in self._state["tables"]:
            del self._state["tables"][table_key]
            self._state["counter"] += 1
            return True
        return False

    def mark_changed(self) -> int:
        """Record a state modification and return the new counter."""
        self._state["counter"] += 1
        return self._state["counter"]

    def clear(self) -> None:
        """Drop all table states and reset counter."""
        self._state["tables"] = {}
        self._state["counter"] = 0

    def __repr__(self) -> str:
        return (
            f"StateManager(session_key='{self._session_key}', "
            f"counter={self.counter}, "
            f"tables={list(self._state['tables'].keys())})"
        )
