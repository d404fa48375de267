"""Single-column, stable sorting with tri-state direction cycling."""

import numbers
from decimal import Decimal
from functools import cmp_to_key
from typing import Any, Callable, List, Optional, Sequence

from ..core.columns import Column, is_missing, read_value
from ..core.logs import logger
from ..core.registry import get_sorter, register_sorter
from ..core.state import ASC, DESC, SortState

LOG = logger(__name__)


def _sign(value: Any) -> int:
    return (value > 0) - (value < 0)


def _is_number(value: Any) -> bool:
    return isinstance(value, (numbers.Real, Decimal))


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def compare_values(a: Any, b: Any) -> int:
    """
    Default ordering for two present values.

    Numbers compare numerically and sort before any other value. Two values
    of the same type use their native ordering (dates, strings). Values of
    different non-numeric types order by type name, then by their `str()`
    forms, so a mixed column still gets a consistent total order.
    """
    a_number, b_number = _is_number(a), _is_number(b)
    if a_number and b_number:
        return _cmp(a, b)
    if a_number != b_number:
        return -1 if a_number else 1
    if type(a) is type(b):
        try:
            return _cmp(a, b)
        except TypeError:
            pass
        return _cmp(str(a), str(b))
    return _cmp((type(a).__name__, str(a)), (type(b).__name__, str(b)))


# =============================================================================
# Built-in sorters
# =============================================================================


@register_sorter("number")
def compare_numbers(a: Any, b: Any) -> int:
    """Compare as floats; values that don't parse use the default ordering."""
    try:
        return _cmp(float(a), float(b))
    except (TypeError, ValueError):
        return compare_values(a, b)


@register_sorter("string")
def compare_strings(a: Any, b: Any) -> int:
    """Case-insensitive text comparison."""
    return _cmp(str(a).casefold(), str(b).casefold())


def _iso(value: Any) -> Any:
    return value.isoformat() if hasattr(value, "isoformat") else value


@register_sorter("date")
def compare_dates(a: Any, b: Any) -> int:
    # date vs datetime raises TypeError; ISO text orders the same way
    try:
        return _cmp(a, b)
    except TypeError:
        return compare_values(_iso(a), _iso(b))


@register_sorter("boolean")
def compare_booleans(a: Any, b: Any) -> int:
    return _cmp(bool(a), bool(b))


def resolve_comparator(column: Column) -> Callable[[Any, Any], int]:
    """
    Pick the comparator for a column.

    Precedence: the column's own `compare`, then its registered `sorter`,
    then `compare_values`. An unknown sorter name falls back to the default.
    """
    if column.compare is not None:
        return column.compare
    if column.sorter:
        try:
            return get_sorter(column.sorter)
        except KeyError:
            LOG.debug(
                "Unknown sorter '%s' on column '%s', using default ordering",
                column.sorter,
                column.id,
            )
    return compare_values


def find_sort_column(
    columns: Sequence[Column], state: SortState
) -> Optional[Column]:
    """Return the active sort column, or None when sorting is a no-op."""
    if not state.is_active:
        return None
    for column in columns:
        if column.id == state.column_id:
            if column.sortable:
                return column
            LOG.debug("Column '%s' is not sortable, ignoring sort", column.id)
            return None
    LOG.debug("Unknown sort column '%s', ignoring sort", state.column_id)
    return None


def sort_rows(
    rows: Sequence[Any],
    columns: Sequence[Column],
    state: SortState,
) -> List[Any]:
    """
    Order rows by the active sort column.

    Missing values (None, NaN, or an accessor that raised) are placed after
    every present value regardless of direction, keeping their input order.
    Present values are ordered with a stable sort, so rows that compare
    equal keep their relative input order in both directions.

    Args:
        rows: Rows to sort
        columns: Column definitions of the table
        state: Current sort state

    Returns:
        New list of rows; a plain copy when there is nothing to sort by
    """
    column = find_sort_column(columns, state)
    if column is None:
        return list(rows)

    compare = resolve_comparator(column)
    direction = 1 if state.direction == ASC else -1

    present = []
    missing = []
    for row in rows:
        value = read_value(column, row)
        if is_missing(value):
            missing.append(row)
        else:
            present.append((value, row))

    present.sort(
        key=cmp_to_key(lambda x, y: direction * _sign(compare(x[0], y[0])))
    )
    return [row for _, row in present] + missing


def next_sort_state(state: SortState, column_id: str) -> SortState:
    """
    Advance the sort state after a click on a column header.

    A different column always starts at ascending. The same column cycles
    asc -> desc -> unsorted.
    """
    if state.column_id != column_id or state.direction is None:
        return SortState(column_id=column_id, direction=ASC)
    if state.direction == ASC:
        return SortState(column_id=column_id, direction=DESC)
    return SortState()
