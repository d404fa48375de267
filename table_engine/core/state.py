"""Immutable table state objects.

All state is held in frozen dataclasses. Nothing here is mutated in place:
the transition functions in `table_engine.engine` return new instances,
which also makes every state object hashable and usable as a cache key.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple, Union

from .errors import InvalidPageSizeError

ASC = "asc"
DESC = "desc"
SORT_DIRECTIONS = (ASC, DESC)

ColumnFilters = Tuple[Tuple[str, str], ...]


def _normalize_column_filters(
    column_filters: Union[Mapping[str, str], Iterable[Tuple[str, str]], None],
) -> ColumnFilters:
    """
    Turn a mapping or pair list into a sorted tuple without empty terms.

    A pair list naming a column twice keeps the last term for it.
    """
    if not column_filters:
        return ()
    items = (
        column_filters.items()
        if isinstance(column_filters, Mapping)
        else column_filters
    )
    terms = {str(k): v for k, v in items}
    return tuple(sorted((k, v) for k, v in terms.items() if v))


@dataclass(frozen=True)
class SortState:
    """
    Active sort column and direction.

    `column_id=None, direction=None` means unsorted (original order).
    """

    column_id: Optional[str] = None
    direction: Optional[str] = None

    def __post_init__(self):
        if self.direction is not None and self.direction not in SORT_DIRECTIONS:
            raise ValueError(
                f"Sort direction must be one of {SORT_DIRECTIONS} or None, "
                f"got {self.direction!r}"
            )

    @property
    def is_active(self) -> bool:
        return self.column_id is not None and self.direction is not None


@dataclass(frozen=True)
class FilterState:
    """
    Global search query plus per-column filter terms.

    `column_filters` accepts a dict and is stored as a sorted tuple of
    `(column_id, term)` pairs; empty terms are dropped since they match
    every row.
    """

    query: str = ""
    column_filters: ColumnFilters = field(default=())

    def __post_init__(self):
        object.__setattr__(self, "query", self.query or "")
        object.__setattr__(
            self, "column_filters", _normalize_column_filters(self.column_filters)
        )

    def term(self, column_id: str) -> str:
        """Return the filter term for a column ('' if none)."""
        return dict(self.column_filters).get(column_id, "")

    def as_dict(self) -> Dict[str, str]:
        return dict(self.column_filters)

    @property
    def active_filter_count(self) -> int:
        """Number of columns with a non-empty filter term."""
        return len(self.column_filters)

    @property
    def is_empty(self) -> bool:
        return not self.query and not self.column_filters


@dataclass(frozen=True)
class PaginationState:
    """1-based page number and page size.

    A non-positive page size is rejected on construction. The page number is
    not bounded here; paginating clamps it to the available pages.
    """

    page: int = 1
    page_size: int = 10

    def __post_init__(self):
        if (
            not isinstance(self.page_size, int)
            or isinstance(self.page_size, bool)
            or self.page_size <= 0
        ):
            raise InvalidPageSizeError(
                f"Page size must be a positive integer, got {self.page_size!r}"
            )


@dataclass(frozen=True)
class TableSnapshot:
    """
    Complete state of one table instance.

    Used to hand state to a session store and to restore it into a table.
    """

    filter: FilterState = field(default_factory=FilterState)
    sort: SortState = field(default_factory=SortState)
    pagination: PaginationState = field(default_factory=PaginationState)
    selected: FrozenSet[Any] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "selected", frozenset(self.selected))
