"""
SMS Tables - Tabular data presentation engine for school admin screens.

This package provides a reusable Streamlit table component with search,
per-column filters, sorting, pagination, row selection with bulk actions,
per-cell render isolation and CSV export.
"""

from .components.table import EnhancedTable, RenderedRow, ResolvedAction
from .core.base import BaseComponent
from .core.descriptors import (
    Action,
    BulkAction,
    Column,
    PerRowActions,
    StaticActions,
)
from .core.registry import get_search_mode, register_search_mode
from .core.selection import SelectionService, row_identity
from .core.state import StateManager, TableState
from .rendering.cells import CellDiagnostics, CellFault, RenderedCell, to_label
from .rendering.export import build_csv, export_filename

__version__ = "0.1.0"

__all__ = [
    # Core
    "BaseComponent",
    "StateManager",
    "TableState",
    "SelectionService",
    "row_identity",
    "register_search_mode",
    "get_search_mode",
    # Descriptors
    "Column",
    "Action",
    "BulkAction",
    "StaticActions",
    "PerRowActions",
    # Components
    "EnhancedTable",
    "RenderedRow",
    "ResolvedAction",
    # Utilities
    "CellDiagnostics",
    "CellFault",
    "RenderedCell",
    "to_label",
    "build_csv",
    "export_filename",
]
