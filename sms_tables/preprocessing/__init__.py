"""Query pipeline stages: normalize, filter, sort and paginate."""

from .filtering import (
    ColumnChecklistSearch,
    MultiFieldSearch,
    SearchMode,
    filter_rows,
    search_rows,
)
from .normalize import is_missing, normalize_rows, resolve_path, stringify
from .pagination import (
    clamp_page,
    page_window,
    paginate,
    pagination_metadata,
    total_pages,
)
from .sorting import next_sort, sort_rows, sort_value_key

__all__ = [
    "normalize_rows",
    "is_missing",
    "resolve_path",
    "stringify",
    "SearchMode",
    "MultiFieldSearch",
    "ColumnChecklistSearch",
    "filter_rows",
    "search_rows",
    "sort_rows",
    "sort_value_key",
    "next_sort",
    "total_pages",
    "clamp_page",
    "paginate",
    "page_window",
    "pagination_metadata",
]
