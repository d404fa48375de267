"""Table facade composing filtering, sorting, pagination and selection."""

from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Tuple, Union

import pandas as pd
import polars as pl

from ..core.columns import Column, columns_from_schema, field_accessor, read_value
from ..core.config import TableConfig
from ..core.errors import DuplicateKeyError, UnknownColumnError
from ..core.logs import logger
from ..core.state import FilterState, PaginationState, SortState, TableSnapshot
from ..engine import filtering, pagination, sorting
from ..engine.pagination import Page
from ..engine.selection import SelectionModel

LOG = logger(__name__)

EXPORT_VISIBLE = "visible"
EXPORT_FILTERED = "filtered"
EXPORT_SCOPES = (EXPORT_VISIBLE, EXPORT_FILTERED)

KeyOf = Union[str, Callable[[Any], Hashable]]


class Table:
    """
    In-memory table engine backing one list view.

    Rows flow through `filter -> sort -> paginate` to produce the visible
    page, while a SelectionModel tracks selected row keys alongside. State
    changes go through the methods below, which replace the immutable state
    objects and notify the rendering layer through optional callbacks.

    Callbacks:
    - on_selection_change(selected_rows): selection changed
    - on_page_change(page): effective page number changed
    - on_sort_change(sort_state): sort column or direction changed
    - on_export_requested(scope): an export of 'visible' or 'filtered' rows
      was requested

    The filtered and sorted rows are memoized per dataset version, filter
    state and sort state, so paging and selection never refilter or resort.

    Example:
        invoices = Table(
            columns=[
                Column.for_field("number", title="Invoice"),
                Column.for_field("partner"),
                Column.for_field("total", sorter="number"),
            ],
            key_of="id",
            rows=fetched_invoices,
            on_selection_change=show_bulk_actions,
        )
        invoices.set_query("acme")
        invoices.toggle_sort("total")
        invoices.page().rows
    """

    def __init__(
        self,
        columns: Sequence[Column],
        key_of: KeyOf = "id",
        rows: Optional[Sequence[Any]] = None,
        config: Optional[TableConfig] = None,
        on_selection_change: Optional[Callable[[List[Any]], None]] = None,
        on_page_change: Optional[Callable[[int], None]] = None,
        on_sort_change: Optional[Callable[[SortState], None]] = None,
        on_export_requested: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the Table.

        Args:
            columns: Column definitions; ids must be unique
            key_of: Function returning a row's unique key, or the name of the
                field holding it (default: 'id')
            rows: Initial dataset
            config: Page size settings (defaults to TableConfig())
            on_selection_change: Called with the selected rows
            on_page_change: Called with the new page number
            on_sort_change: Called with the new SortState
            on_export_requested: Called with the requested export scope
        """
        self._columns: List[Column] = list(columns)
        self._column_index: Dict[str, Column] = {}
        for column in self._columns:
            if column.id in self._column_index:
                raise ValueError(f"Duplicate column id '{column.id}'")
            self._column_index[column.id] = column

        self._key_of = field_accessor(key_of) if isinstance(key_of, str) else key_of
        self._config = config or TableConfig()

        self._filter = FilterState()
        self._sort = SortState()
        self._pagination = PaginationState(page_size=self._config.page_size)
        self._selection = SelectionModel(self._key_of)

        self._rows: List[Any] = []
        self._rows_version = 0
        self._view_cache: Optional[Tuple[Tuple[Any, ...], List[Any]]] = None

        self._on_selection_change = on_selection_change
        self._on_page_change = on_page_change
        self._on_sort_change = on_sort_change
        self._on_export_requested = on_export_requested

        if rows is not None:
            self.set_rows(rows)

    @classmethod
    def from_frame(
        cls,
        frame: Union[pl.DataFrame, pl.LazyFrame],
        key_field: str = "id",
        columns: Optional[Sequence[Column]] = None,
        **kwargs,
    ) -> "Table":
        """
        Create a table over the rows of a polars frame.

        Rows become dicts (one per frame row). When no columns are given
        they are generated from the frame schema, leaving out the key field.

        Args:
            frame: Polars DataFrame or LazyFrame (collected here)
            key_field: Name of the column holding the row key
            columns: Optional explicit column definitions
            **kwargs: Passed on to Table()

        Returns:
            New Table
        """
        if isinstance(frame, pl.LazyFrame):
            frame = frame.collect()
        if columns is None:
            columns = columns_from_schema(frame.schema, exclude=[key_field])
        return cls(
            columns=columns,
            key_of=key_field,
            rows=list(frame.iter_rows(named=True)),
            **kwargs,
        )

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def columns(self) -> List[Column]:
        return list(self._columns)

    @property
    def config(self) -> TableConfig:
        return self._config

    @property
    def rows(self) -> List[Any]:
        """The full, unfiltered dataset."""
        return list(self._rows)

    @property
    def filter_state(self) -> FilterState:
        return self._filter

    @property
    def sort_state(self) -> SortState:
        return self._sort

    @property
    def pagination_state(self) -> PaginationState:
        return self._pagination

    @property
    def selection(self) -> SelectionModel:
        return self._selection

    def column(self, column_id: str) -> Column:
        """
        Look up a column by id.

        Raises:
            UnknownColumnError: If no column has that id
        """
        try:
            return self._column_index[column_id]
        except KeyError:
            raise UnknownColumnError(
                f"No column '{column_id}'. Available columns: "
                f"{list(self._column_index)}"
            ) from None

    # =========================================================================
    # Dataset
    # =========================================================================

    def set_rows(self, rows: Sequence[Any], reconcile: bool = True) -> None:
        """
        Replace the dataset with a freshly fetched snapshot.

        Args:
            rows: New rows
            reconcile: Drop selected keys missing from the new rows

        Raises:
            DuplicateKeyError: If two rows share a key
        """
        rows = list(rows)
        live_keys = set()
        for row in rows:
            key = self._key_of(row)
            if key in live_keys:
                raise DuplicateKeyError(f"Duplicate row key {key!r}")
            live_keys.add(key)

        self._rows = rows
        self._rows_version += 1
        self._view_cache = None
        LOG.debug("Dataset version %d with %d rows", self._rows_version, len(rows))

        if reconcile:
            self._set_selection(self._selection.reconcile(live_keys))
        self._set_pagination(self._clamped(self._pagination))

    def set_frame(self, frame: Union[pl.DataFrame, pl.LazyFrame], **kwargs) -> None:
        """Replace the dataset with the rows of a polars frame."""
        if isinstance(frame, pl.LazyFrame):
            frame = frame.collect()
        self.set_rows(list(frame.iter_rows(named=True)), **kwargs)

    def _cache_key(self) -> Tuple[Any, ...]:
        return (self._rows_version, self._filter, self._sort)

    def filtered_rows(self) -> List[Any]:
        """All rows passing the filter, in sort order."""
        key = self._cache_key()
        if self._view_cache is None or self._view_cache[0] != key:
            filtered = filtering.filter_rows(self._rows, self._columns, self._filter)
            ordered = sorting.sort_rows(filtered, self._columns, self._sort)
            self._view_cache = (key, ordered)
        return list(self._view_cache[1])

    def page(self) -> Page:
        """The currently visible page."""
        return pagination.paginate(
            self.filtered_rows(), self._pagination, enabled=self._config.pagination
        )

    def visible_rows(self) -> List[Any]:
        return self.page().rows

    def total_pages(self) -> int:
        if not self._config.pagination:
            return 1
        return pagination.page_count(
            len(self.filtered_rows()), self._pagination.page_size
        )

    # =========================================================================
    # Filtering
    # =========================================================================

    def set_query(self, query: Optional[str]) -> None:
        """Set the global search query; returns to page 1 when it changes."""
        self._set_filter(filtering.with_query(self._filter, query))

    def clear_query(self) -> None:
        self._set_filter(filtering.clear_query(self._filter))

    def set_column_filter(self, column_id: str, term: Optional[str]) -> None:
        """
        Set or clear (empty term) the filter of one column.

        Raises:
            UnknownColumnError: If the column does not exist
        """
        self.column(column_id)
        self._set_filter(filtering.with_column_filter(self._filter, column_id, term))

    def clear_column_filters(self) -> None:
        self._set_filter(filtering.clear_column_filters(self._filter))

    def _set_filter(self, state: FilterState) -> None:
        if state == self._filter:
            return
        self._filter = state
        self._set_pagination(pagination.reset_page(self._pagination))

    # =========================================================================
    # Sorting
    # =========================================================================

    def toggle_sort(self, column_id: str) -> SortState:
        """
        Handle a click on a column header.

        Cycles asc -> desc -> unsorted on the same column and starts a new
        column at asc. Clicks on unknown or non-sortable columns are ignored.

        Returns:
            The sort state after the click
        """
        column = self._column_index.get(column_id)
        if column is None:
            LOG.debug("Ignoring sort click on unknown column '%s'", column_id)
            return self._sort
        if not column.sortable:
            LOG.debug("Ignoring sort click on non-sortable column '%s'", column_id)
            return self._sort
        self._set_sort(sorting.next_sort_state(self._sort, column_id))
        return self._sort

    def set_sort(self, state: SortState) -> None:
        """Replace the sort state; an unknown column simply leaves rows unsorted."""
        self._set_sort(state)

    def _set_sort(self, state: SortState) -> None:
        if state == self._sort:
            return
        self._sort = state
        if self._on_sort_change is not None:
            self._on_sort_change(state)

    # =========================================================================
    # Pagination
    # =========================================================================

    def go_to_page(self, page: int) -> int:
        """
        Move to a page, clamped into the available range.

        Returns:
            The effective page number
        """
        requested = pagination.with_page(self._pagination, page)
        self._set_pagination(self._clamped(requested))
        return self._pagination.page

    def first_page(self) -> int:
        return self.go_to_page(1)

    def previous_page(self) -> int:
        self._set_pagination(
            pagination.previous_page(self._pagination, self.total_pages())
        )
        return self._pagination.page

    def next_page(self) -> int:
        self._set_pagination(pagination.next_page(self._pagination, self.total_pages()))
        return self._pagination.page

    def last_page(self) -> int:
        self._set_pagination(pagination.last_page(self._pagination, self.total_pages()))
        return self._pagination.page

    def set_page_size(self, page_size: int) -> None:
        """
        Change the page size and return to page 1.

        Setting the current size again keeps the page.

        Raises:
            InvalidPageSizeError: If the size is not one of
                config.page_size_options
        """
        state = pagination.with_page_size(
            self._pagination, page_size, self._config.page_size_options
        )
        if state.page_size == self._pagination.page_size:
            return
        self._set_pagination(state)

    def _clamped(self, state: PaginationState) -> PaginationState:
        page = pagination.clamp_page(state.page, self.total_pages())
        return pagination.with_page(state, page)

    def _set_pagination(self, state: PaginationState) -> None:
        previous = self._pagination.page
        self._pagination = state
        if state.page != previous and self._on_page_change is not None:
            self._on_page_change(state.page)

    # =========================================================================
    # Selection
    # =========================================================================

    def is_selected(self, key: Hashable) -> bool:
        return self._selection.is_selected(key)

    def selected_keys(self):
        return self._selection.selected_keys()

    def selected_rows(self) -> List[Any]:
        """Selected rows present in the dataset, in dataset order."""
        return self._selection.selected_rows(self._rows)

    def toggle_selection(self, key: Hashable) -> None:
        self._set_selection(self._selection.toggle(key))

    def toggle_row(self, row: Any) -> None:
        self._set_selection(self._selection.toggle_row(row))

    def select_visible(self) -> None:
        """Select or deselect every row on the visible page."""
        self._set_selection(self._selection.select_visible(self.visible_rows()))

    def clear_selection(self) -> None:
        self._set_selection(self._selection.clear())

    def reconcile(self, live_keys=None) -> None:
        """Drop selected keys missing from live_keys (default: current rows)."""
        if live_keys is None:
            live_keys = {self._key_of(row) for row in self._rows}
        self._set_selection(self._selection.reconcile(live_keys))

    def header_state(self) -> str:
        """Header checkbox state for the visible page."""
        return self._selection.header_state(self.visible_rows())

    def _set_selection(self, selection: SelectionModel) -> None:
        if selection is self._selection:
            return
        self._selection = selection
        if self._on_selection_change is not None:
            self._on_selection_change(self.selected_rows())

    # =========================================================================
    # Export
    # =========================================================================

    def export_rows(self, scope: str = EXPORT_FILTERED) -> List[Any]:
        """
        Rows for an export collaborator.

        Args:
            scope: 'visible' for the current page, 'filtered' for every row
                passing the filter; both in sort order

        Raises:
            ValueError: If scope is not a known export scope
        """
        if scope == EXPORT_VISIBLE:
            return self.visible_rows()
        if scope == EXPORT_FILTERED:
            return self.filtered_rows()
        raise ValueError(f"Export scope must be one of {EXPORT_SCOPES}, got {scope!r}")

    def export_frame(
        self,
        scope: str = EXPORT_FILTERED,
        column_ids: Optional[Sequence[str]] = None,
    ) -> pd.DataFrame:
        """
        Cell values of the exported rows as a pandas DataFrame.

        Values are read through the column accessors; one frame column per
        table column, named by column id.

        Args:
            scope: 'visible' or 'filtered'
            column_ids: Columns to include (default: all, in table order)

        Returns:
            pandas DataFrame

        Raises:
            UnknownColumnError: If a requested column does not exist
        """
        columns = (
            [self.column(column_id) for column_id in column_ids]
            if column_ids is not None
            else self._columns
        )
        rows = self.export_rows(scope)
        data = {
            column.id: [read_value(column, row) for row in rows] for column in columns
        }
        return pd.DataFrame(data, columns=[column.id for column in columns])

    def request_export(self, scope: str = EXPORT_FILTERED) -> List[Any]:
        """Notify the export collaborator and return the rows to export."""
        rows = self.export_rows(scope)
        if self._on_export_requested is not None:
            self._on_export_requested(scope)
        return rows

    # =========================================================================
    # Snapshots
    # =========================================================================

    def snapshot(self) -> TableSnapshot:
        """Capture filter, sort, pagination and selection state."""
        return TableSnapshot(
            filter=self._filter,
            sort=self._sort,
            pagination=self._pagination,
            selected=self._selection.selected_keys(),
        )

    def restore(self, snapshot: TableSnapshot) -> None:
        """
        Restore state captured by snapshot().

        No callbacks fire; the page is clamped to the current dataset.

        Raises:
            InvalidPageSizeError: If the snapshot's page size is not allowed
        """
        page_size = pagination.with_page_size(
            self._pagination,
            snapshot.pagination.page_size,
            self._config.page_size_options,
        ).page_size
        self._filter = snapshot.filter
        self._sort = snapshot.sort
        self._selection = SelectionModel(self._key_of, snapshot.selected)
        self._pagination = self._clamped(
            PaginationState(page=snapshot.pagination.page, page_size=page_size)
        )

    def __repr__(self) -> str:
        return (
            f"Table(columns={[column.id for column in self._columns]}, "
            f"rows={len(self._rows)}, "
            f"filter={self._filter}, sort={self._sort}, "
            f"pagination={self._pagination}, "
            f"selected={len(self._selection)})"
        )
