"""Core infrastructure for table_engine."""

from .columns import Column, columns_from_schema, field_accessor
from .config import TableConfig
from .errors import (
    DuplicateKeyError,
    InvalidPageSizeError,
    TableEngineError,
    UnknownColumnError,
)
from .registry import get_sorter, register_sorter
from .session import TableSession
from .state import FilterState, PaginationState, SortState, TableSnapshot

__all__ = [
    "Column",
    "columns_from_schema",
    "field_accessor",
    "TableConfig",
    "FilterState",
    "SortState",
    "PaginationState",
    "TableSnapshot",
    "TableSession",
    "register_sorter",
    "get_sorter",
    "TableEngineError",
    "InvalidPageSizeError",
    "UnknownColumnError",
    "DuplicateKeyError",
]
