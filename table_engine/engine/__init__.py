"""Pure filter, sort, pagination and selection functions."""

from .filtering import filter_rows
from .pagination import ELLIPSIS, Page, page_numbers, paginate
from .selection import SelectionModel
from .sorting import compare_values, next_sort_state, sort_rows

__all__ = [
    "filter_rows",
    "sort_rows",
    "next_sort_state",
    "compare_values",
    "paginate",
    "page_numbers",
    "Page",
    "ELLIPSIS",
    "SelectionModel",
]
