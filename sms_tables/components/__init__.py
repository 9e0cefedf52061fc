"""Table components."""

from .table import EnhancedTable

__all__ = ["EnhancedTable"]
