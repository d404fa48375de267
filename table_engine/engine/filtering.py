"""Search and per-column filtering of row collections."""

from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.columns import Column, stringify_cell
from ..core.logs import logger
from ..core.state import FilterState

LOG = logger(__name__)


def _resolve_column_terms(
    columns: Sequence[Column],
    state: FilterState,
) -> List[Tuple[Column, str]]:
    """
    Pair each column filter with its column, lowercasing the term.

    Filters naming an unknown column are ignored.
    """
    by_id: Dict[str, Column] = {column.id: column for column in columns}
    resolved = []
    for column_id, term in state.column_filters:
        column = by_id.get(column_id)
        if column is None:
            LOG.debug("Ignoring filter on unknown column '%s'", column_id)
            continue
        resolved.append((column, str(term).lower()))
    return resolved


def row_matches(
    row: Any,
    searchable: Sequence[Column],
    query: str,
    column_terms: Sequence[Tuple[Column, str]],
) -> bool:
    """
    Check a single row against a lowercased query and column terms.

    Args:
        row: The row to test
        searchable: Filterable columns the query is matched against
        query: Lowercased global search term ('' matches everything)
        column_terms: (column, lowercased term) pairs that must all match

    Returns:
        True if the row passes the global search AND every column filter
    """
    if query and not any(
        query in stringify_cell(column, row).lower() for column in searchable
    ):
        return False
    return all(
        term in stringify_cell(column, row).lower() for column, term in column_terms
    )


def filter_rows(
    rows: Sequence[Any],
    columns: Sequence[Column],
    state: FilterState,
) -> List[Any]:
    """
    Reduce rows to those matching the global query and column filters.

    The query matches a row if ANY filterable column's text contains it;
    every non-empty column filter must match its own column. Matching is
    case-insensitive substring search on the stringified cell value.
    Input order is preserved and the input sequence is never modified.

    Args:
        rows: Rows to filter
        columns: Column definitions of the table
        state: Current filter state

    Returns:
        New list of retained rows
    """
    if state.is_empty:
        return list(rows)

    query = state.query.lower()
    searchable = [column for column in columns if column.filterable]
    column_terms = _resolve_column_terms(columns, state)

    return [
        row for row in rows if row_matches(row, searchable, query, column_terms)
    ]


# =============================================================================
# State transitions
# =============================================================================


def with_query(state: FilterState, query: Optional[str]) -> FilterState:
    """Return a copy of the filter state with a new global query."""
    return replace(state, query=query or "")


def clear_query(state: FilterState) -> FilterState:
    return replace(state, query="")


def with_column_filter(
    state: FilterState, column_id: str, term: Optional[str]
) -> FilterState:
    """
    Return a copy with the filter term of one column set.

    An empty or None term removes the column's filter.
    """
    filters = state.as_dict()
    if term:
        filters[column_id] = term
    else:
        filters.pop(column_id, None)
    return replace(state, column_filters=filters)


def clear_column_filters(state: FilterState) -> FilterState:
    """Drop every column filter, keeping the global query."""
    return replace(state, column_filters=())
