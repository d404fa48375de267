"""Exceptions raised by the table engine.

Data-path operations (filter, sort, paginate, selection) never raise for
malformed rows or out-of-range state. These errors are reserved for caller
mistakes at state-transition boundaries:
- InvalidPageSizeError: page size is not positive or not allow-listed
- UnknownColumnError: an explicit column lookup names no known column
- DuplicateKeyError: a dataset snapshot maps two rows to the same key
"""


class TableEngineError(Exception):
    """Base class for all table engine errors."""

    pass


class InvalidPageSizeError(TableEngineError, ValueError):
    """Raised when a page size is non-positive or outside the allowed options.

    A page size of zero or less would leave the number of pages undefined,
    so it is rejected when the pagination state is changed rather than
    when a page is computed.
    """

    pass


class UnknownColumnError(TableEngineError, KeyError):
    """Raised when a column id is looked up explicitly but not defined."""

    pass


class DuplicateKeyError(TableEngineError, ValueError):
    """Raised when two rows of one dataset snapshot share a key."""

    pass
