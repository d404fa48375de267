"""Column definitions and value access for table rows."""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, List, Optional, Union

import numpy as np
import polars as pl

from .logs import logger

LOG = logger(__name__)

_NUMERIC_DTYPES = (
    pl.Int8,
    pl.Int16,
    pl.Int32,
    pl.Int64,
    pl.UInt8,
    pl.UInt16,
    pl.UInt32,
    pl.UInt64,
    pl.Float32,
    pl.Float64,
    pl.Decimal,
)


def field_accessor(name: str) -> Callable[[Any], Any]:
    """
    Build an accessor reading one field of a row.

    Mapping rows are read by key, any other row by attribute. A field the
    row does not have reads as None.

    Args:
        name: Key or attribute name

    Returns:
        Accessor function taking a row
    """

    def accessor(row: Any) -> Any:
        if isinstance(row, Mapping):
            return row.get(name)
        return getattr(row, name, None)

    accessor.__name__ = f"field_{name}"
    return accessor


@dataclass(frozen=True)
class Column:
    """
    Describes how to read, sort and filter one attribute of a row.

    Attributes:
        id: Unique column identifier within a table
        accessor: Function returning the cell value for a row
        title: Header label (defaults to a title-cased id)
        sortable: Whether the column can become the active sort column
        filterable: Whether the global search looks at this column
        compare: Optional comparator overriding the sorter for this column
        stringify: Optional function turning a cell value into search text
        sorter: Optional registered sorter name ('number', 'string', ...)
    """

    id: str
    accessor: Callable[[Any], Any]
    title: Optional[str] = None
    sortable: bool = True
    filterable: bool = True
    compare: Optional[Callable[[Any, Any], int]] = None
    stringify: Optional[Callable[[Any], str]] = None
    sorter: Optional[str] = None

    @classmethod
    def for_field(cls, id: str, field: Optional[str] = None, **kwargs) -> "Column":
        """Create a column reading `field` (defaults to the column id)."""
        return cls(id=id, accessor=field_accessor(field or id), **kwargs)

    @property
    def header(self) -> str:
        """Display title for the column header."""
        if self.title:
            return self.title
        return self.id.replace("_", " ").title()


def is_missing(value: Any) -> bool:
    """Return True for None, floating-point NaN and Decimal NaN."""
    if value is None:
        return True
    if isinstance(value, Decimal):
        return value.is_nan()
    if isinstance(value, (float, np.floating)):
        return bool(np.isnan(value))
    return False


def read_value(column: Column, row: Any) -> Any:
    """
    Read a cell value through the column accessor.

    An accessor that raises reads as None, so a single malformed row can
    not break filtering or sorting of the whole table.
    """
    try:
        return column.accessor(row)
    except Exception as exc:
        LOG.debug("Accessor for column '%s' failed: %r", column.id, exc)
        return None


def stringify_cell(column: Column, row: Any) -> str:
    """
    Return the searchable text of a cell.

    Missing values become an empty string. Other values go through the
    column's `stringify` when given, `str()` otherwise.
    """
    value = read_value(column, row)
    if is_missing(value):
        return ""
    if column.stringify is None:
        return str(value)
    try:
        return column.stringify(value)
    except Exception as exc:
        LOG.debug("Stringify for column '%s' failed: %r", column.id, exc)
        return ""


def sorter_for_dtype(dtype: pl.DataType) -> str:
    """Pick a registered sorter name for a polars dtype."""
    if dtype in _NUMERIC_DTYPES:
        return "number"
    if dtype == pl.Boolean:
        return "boolean"
    if dtype in (pl.Date, pl.Datetime, pl.Time):
        return "date"
    return "string"


def columns_from_schema(
    schema: Union[pl.Schema, pl.DataFrame, pl.LazyFrame],
    exclude: Optional[List[str]] = None,
) -> List[Column]:
    """
    Auto-generate column definitions from a polars schema.

    Each column reads the field of the same name from dict rows (as produced
    by `DataFrame.iter_rows(named=True)`) and gets a sorter chosen from its
    dtype. Nested and binary columns are neither sortable nor filterable.

    Args:
        schema: Polars schema, or a DataFrame/LazyFrame to take it from
        exclude: Column names to leave out

    Returns:
        List of Column definitions in schema order
    """
    if isinstance(schema, (pl.DataFrame, pl.LazyFrame)):
        schema = schema.collect_schema()

    excluded = set(exclude or [])
    columns = []
    for name, dtype in zip(schema.names(), schema.dtypes()):
        if name in excluded:
            continue
        plain = not (dtype.is_nested() or dtype == pl.Binary)
        columns.append(
            Column.for_field(
                name,
                sortable=plain,
                filterable=plain,
                sorter=sorter_for_dtype(dtype) if plain else None,
            )
        )
    return columns
