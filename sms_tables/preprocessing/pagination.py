"""Page window slicing and page-number navigation helpers."""

import math
from typing import Any, Dict, List, Sequence


def total_pages(row_count: int, page_size: int) -> int:
    """Number of pages for row_count rows (at least 1, even when empty)."""
    return max(1, math.ceil(row_count / page_size))


def clamp_page(page: int, pages: int) -> int:
    """Bound a page number to [1, pages]."""
    return max(1, min(page, max(1, pages)))


def paginate(
    rows: Sequence[Any], page: int, page_size: int, paginated: bool = True
) -> List[Any]:
    """
    Slice rows down to one page.

    Args:
        rows: Sorted rows
        page: 1-based page number (assumed already clamped)
        page_size: Rows per page
        paginated: If False, all rows are returned

    Returns:
        Rows of the requested page
    """
    if not paginated:
        return list(rows)
    start = (page - 1) * page_size
    return list(rows[start : start + page_size])


def page_window(current: int, pages: int, width: int = 5) -> List[int]:
    """
    Page numbers to show as buttons, centered on the current page.

    Near the start the first `width` pages are shown, near the end the last
    `width` pages, otherwise current-2 .. current+2 (for width 5).

    Args:
        current: Current page
        pages: Total number of pages
        width: Maximum number of buttons

    Returns:
        Ascending list of page numbers
    """
    if pages <= width:
        return list(range(1, pages + 1))

    half = width // 2
    if current <= half + 1:
        first = 1
    elif current >= pages - half:
        first = pages - width + 1
    else:
        first = current - half
    return list(range(first, first + width))


def pagination_metadata(
    row_count: int, page: int, page_size: int, paginated: bool = True
) -> Dict[str, Any]:
    """
    Describe the page state for the pagination footer.

    Returns:
        Dict with page, page_size, total_rows, total_pages, start, end,
        window, has_previous and has_next
    """
    pages = total_pages(row_count, page_size) if paginated else 1
    page = clamp_page(page, pages)
    if paginated:
        start = (page - 1) * page_size + 1 if row_count else 0
        end = min(page * page_size, row_count)
    else:
        start = 1 if row_count else 0
        end = row_count
    return {
        "page": page,
        "page_size": page_size,
        "total_rows": row_count,
        "total_pages": pages,
        "start": start,
        "end": end,
        "summary": f"Showing {start} to {end} of {row_count} results",
        "window": page_window(page, pages),
        "has_previous": page > 1,
        "has_next": page < pages,
    }
