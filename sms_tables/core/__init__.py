"""Core infrastructure for sms_tables."""

from .base import BaseComponent
from .registry import get_search_mode, register_search_mode
from .selection import SelectionService, row_identity
from .state import StateManager, TableState

__all__ = [
    "BaseComponent",
    "StateManager",
    "TableState",
    "SelectionService",
    "row_identity",
    "register_search_mode",
    "get_search_mode",
]
