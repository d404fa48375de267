"""Page slicing and compact page-number sequences."""

import math
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence, Union

from ..core.errors import InvalidPageSizeError
from ..core.logs import logger
from ..core.state import PaginationState

LOG = logger(__name__)

ELLIPSIS = "ellipsis"

PageNumber = Union[int, str]


def page_count(total_rows: int, page_size: int) -> int:
    """Number of pages for a row count; an empty dataset still has one page."""
    return max(1, math.ceil(total_rows / page_size))


def clamp_page(page: Any, total_pages: int) -> int:
    """Clamp a requested page into [1, total_pages]."""
    try:
        page = int(page)
    except (TypeError, ValueError):
        LOG.debug("Non-numeric page %r, using page 1", page)
        return 1
    return min(max(page, 1), total_pages)


def page_numbers(current: int, total: int) -> List[PageNumber]:
    """
    Compute the page-number sequence shown by pagination controls.

    Up to seven pages are listed in full. Beyond that, four pages are shown
    next to the first or last page when the current page is near either
    end, and a three-wide window around the current page otherwise, with
    ELLIPSIS marking the gaps.

    Args:
        current: Current 1-based page
        total: Total number of pages

    Returns:
        List of page numbers and ELLIPSIS markers

    Example:
        >>> page_numbers(5, 10)
        [1, 'ellipsis', 4, 5, 6, 'ellipsis', 10]
    """
    if total <= 7:
        return list(range(1, total + 1))
    if current <= 3:
        return [1, 2, 3, 4, ELLIPSIS, total]
    if current >= total - 2:
        return [1, ELLIPSIS, total - 3, total - 2, total - 1, total]
    return [1, ELLIPSIS, current - 1, current, current + 1, ELLIPSIS, total]


@dataclass(frozen=True)
class Page:
    """
    One page of an ordered, filtered dataset.

    Attributes:
        rows: Rows on this page
        page: Effective (clamped) 1-based page number
        total_pages: Number of pages, at least 1
        total_rows: Number of rows across all pages
        page_size: Rows per page used for slicing
    """

    rows: List[Any] = field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    total_rows: int = 0
    page_size: int = 10

    @property
    def start(self) -> int:
        """1-based position of the first row on the page (0 when empty)."""
        if not self.rows:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end(self) -> int:
        """1-based position of the last row on the page (0 when empty)."""
        if not self.rows:
            return 0
        return self.start + len(self.rows) - 1

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def page_numbers(self) -> List[PageNumber]:
        return page_numbers(self.page, self.total_pages)


def paginate(
    rows: Sequence[Any],
    state: PaginationState,
    enabled: bool = True,
) -> Page:
    """
    Slice rows into the requested page.

    Out-of-range page numbers are clamped rather than rejected, so asking
    for page 999 of a three-page dataset returns page 3.

    Args:
        rows: Filtered and sorted rows
        state: Requested page and page size
        enabled: When False, all rows form a single page

    Returns:
        Page with the rows of the effective page
    """
    total_rows = len(rows)
    if not enabled:
        return Page(
            rows=list(rows),
            page=1,
            total_pages=1,
            total_rows=total_rows,
            page_size=state.page_size,
        )

    total_pages = page_count(total_rows, state.page_size)
    page = clamp_page(state.page, total_pages)
    if page != state.page:
        LOG.debug("Clamped page %r to %d of %d", state.page, page, total_pages)

    offset = (page - 1) * state.page_size
    return Page(
        rows=list(rows[offset : offset + state.page_size]),
        page=page,
        total_pages=total_pages,
        total_rows=total_rows,
        page_size=state.page_size,
    )


# =============================================================================
# State transitions
# =============================================================================


def with_page(state: PaginationState, page: int) -> PaginationState:
    """Request a page; bounds are applied when paginating."""
    return replace(state, page=page)


def reset_page(state: PaginationState) -> PaginationState:
    """Go back to page 1, e.g. after the filter changed."""
    if state.page == 1:
        return state
    return replace(state, page=1)


def with_page_size(
    state: PaginationState,
    page_size: int,
    options: Optional[Sequence[int]] = None,
) -> PaginationState:
    """
    Change the page size and reset to page 1.

    Args:
        state: Current pagination state
        page_size: New rows per page
        options: Allow-list of page sizes; None accepts any positive size

    Returns:
        New pagination state on page 1

    Raises:
        InvalidPageSizeError: If page_size is not positive or not allowed
    """
    if options and page_size not in options:
        raise InvalidPageSizeError(
            f"Page size {page_size!r} is not one of {list(options)}"
        )
    return PaginationState(page=1, page_size=page_size)


def first_page(state: PaginationState) -> PaginationState:
    return reset_page(state)


def previous_page(state: PaginationState, total_pages: int) -> PaginationState:
    return replace(state, page=max(1, clamp_page(state.page, total_pages) - 1))


def next_page(state: PaginationState, total_pages: int) -> PaginationState:
    return replace(
        state, page=min(total_pages, clamp_page(state.page, total_pages) + 1)
    )


def last_page(state: PaginationState, total_pages: int) -> PaginationState:
    return replace(state, page=max(1, total_pages))
