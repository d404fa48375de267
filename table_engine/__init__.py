"""
Table Engine - In-memory filtering, sorting, pagination and selection.

This package provides the data engine behind list views: global search and
per-column filters, single-column tri-state sorting, clamped pagination with
compact page-number sequences, and cross-page row selection keyed by a
logical row key.
"""

from .components.table import EXPORT_FILTERED, EXPORT_VISIBLE, Table
from .core.columns import Column, columns_from_schema, field_accessor
from .core.config import TableConfig
from .core.errors import (
    DuplicateKeyError,
    InvalidPageSizeError,
    TableEngineError,
    UnknownColumnError,
)
from .core.registry import get_sorter, register_sorter
from .core.session import TableSession
from .core.state import FilterState, PaginationState, SortState, TableSnapshot
from .engine.filtering import filter_rows
from .engine.pagination import ELLIPSIS, Page, page_numbers, paginate
from .engine.selection import SelectionModel
from .engine.sorting import next_sort_state, sort_rows

__version__ = "0.1.0"

__all__ = [
    # Core
    "Column",
    "TableConfig",
    "FilterState",
    "SortState",
    "PaginationState",
    "TableSnapshot",
    "TableSession",
    "register_sorter",
    "get_sorter",
    # Engine
    "filter_rows",
    "sort_rows",
    "next_sort_state",
    "paginate",
    "page_numbers",
    "Page",
    "ELLIPSIS",
    "SelectionModel",
    # Components
    "Table",
    "EXPORT_VISIBLE",
    "EXPORT_FILTERED",
    # Utilities
    "columns_from_schema",
    "field_accessor",
    # Errors
    "TableEngineError",
    "InvalidPageSizeError",
    "UnknownColumnError",
    "DuplicateKeyError",
]
