"""Base component class for table-like components."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union

from ..preprocessing.normalize import normalize_rows
from .descriptors import Column, build_columns
from .state import TableState

if TYPE_CHECKING:
    from .state import StateManager


class BaseComponent(ABC):
    """
    Abstract base class for components that present caller-supplied rows.

    The component itself holds only configuration and the normalized rows.
    Query state (search, sort, page, selection) lives in a TableState that
    is passed into every operation, so the same component object can be
    rebuilt on each Streamlit rerun while the state persists in the session.

    Attributes:
        _columns: Column descriptors in display order
        _raw_data: The object last assigned as data (identity-tracked)
        _rows: Normalized rows derived from _raw_data
        _config: Pass-through configuration options
        _component_type: Class-level component type identifier
    """

    _component_type: str = ""

    def __init__(
        self,
        data: Any = None,
        columns: Optional[Sequence[Union[Column, Dict[str, Any]]]] = None,
        **kwargs,
    ):
        """
        Initialize the component.

        Args:
            data: Row data. Lists/tuples of mappings and polars/pandas frames
                are accepted; any other value is treated as no rows.
            columns: Column descriptors (Column objects or dicts with the same
                field names). Keys must be unique.
            **kwargs: Extra configuration passed through to component args

        Raises:
            ValueError: If two columns share a key
        """
        self._columns: List[Column] = build_columns(columns or [])
        self._config = kwargs
        self._raw_data: Any = None
        self._rows: List[Any] = []
        self._normalized = False
        self.data = data

    @property
    def data(self) -> Any:
        """The data object as supplied by the caller."""
        return self._raw_data

    @data.setter
    def data(self, value: Any) -> None:
        # Re-normalize only when a different object is supplied
        if self._normalized and value is self._raw_data:
            return
        self._raw_data = value
        self._rows = normalize_rows(value)
        self._normalized = True

    @property
    def rows(self) -> List[Any]:
        """Normalized rows (never None)."""
        return self._rows

    @property
    def columns(self) -> List[Column]:
        return list(self._columns)

    @property
    def column_keys(self) -> List[str]:
        return [column.key for column in self._columns]

    def get_column(self, key: str) -> Optional[Column]:
        """Return the column with the given key, or None."""
        for column in self._columns:
            if column.key == key:
                return column
        return None

    def new_state(self) -> TableState:
        """Fresh query state for this component (as on mount)."""
        return TableState(self.column_keys)

    @abstractmethod
    def _prepare_view_data(self, state: TableState) -> Dict[str, Any]:
        """
        Run the query pipeline and prepare what the bridge renders.

        Args:
            state: The table's query state (may be corrected in place)

        Returns:
            Dict with rendered rows and metadata
        """
        pass

    @abstractmethod
    def _get_data_key(self) -> str:
        """Return the key under which the rendered page is stored."""
        pass

    @abstractmethod
    def _get_component_args(self) -> Dict[str, Any]:
        """
        Get the component configuration used by the bridge.

        Returns:
            Dict with component configuration
        """
        pass

    def __call__(
        self,
        key: Optional[str] = None,
        state_manager: Optional["StateManager"] = None,
    ) -> TableState:
        """
        Render the component in Streamlit.

        Args:
            key: Unique key for this table instance. State is kept per key.
            state_manager: Optional StateManager holding table states.
                If not provided, uses a default shared StateManager.

        Returns:
            The table's TableState after rendering
        """
        from ..rendering.bridge import render_table
        from .state import get_default_state_manager

        if state_manager is None:
            state_manager = get_default_state_manager()

        return render_table(component=self, state_manager=state_manager, key=key)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"columns={self.column_keys}, "
            f"rows={len(self._rows)}, "
            f"config={self._config})"
        )
