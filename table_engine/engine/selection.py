"""Cross-page row selection keyed by logical row keys."""

from typing import Any, Callable, FrozenSet, Hashable, Iterable, List, Sequence

from ..core.logs import logger

LOG = logger(__name__)

CHECKED = "checked"
INDETERMINATE = "indeterminate"
UNCHECKED = "unchecked"


class SelectionModel:
    """
    Immutable set of selected row keys.

    Rows are identified by `key_of(row)`, never by object identity, so a row
    refetched as a new object keeps its selection. Membership does not
    depend on filtering, sorting or paging: a selected row stays selected
    while it is out of view, until it is toggled off, cleared, or dropped by
    `reconcile` after the source dataset changed.

    Every operation that changes the selection returns a new SelectionModel
    and leaves the original untouched.
    """

    __slots__ = ("_key_of", "_keys")

    def __init__(
        self,
        key_of: Callable[[Any], Hashable],
        keys: Iterable[Hashable] = (),
    ):
        """
        Initialize the selection.

        Args:
            key_of: Function returning the unique, stable key of a row
            keys: Initially selected keys
        """
        self._key_of = key_of
        self._keys: FrozenSet[Hashable] = frozenset(keys)

    def _with_keys(self, keys: Iterable[Hashable]) -> "SelectionModel":
        keys = frozenset(keys)
        if keys == self._keys:
            return self
        return SelectionModel(self._key_of, keys)

    def key(self, row: Any) -> Hashable:
        """Return the key of a row."""
        return self._key_of(row)

    def selected_keys(self) -> FrozenSet[Hashable]:
        """Return the selected keys."""
        return self._keys

    def is_selected(self, key: Hashable) -> bool:
        return key in self._keys

    def is_row_selected(self, row: Any) -> bool:
        return self._key_of(row) in self._keys

    def toggle(self, key: Hashable) -> "SelectionModel":
        """Select the key if unselected, deselect it otherwise."""
        if key in self._keys:
            return self._with_keys(self._keys - {key})
        return self._with_keys(self._keys | {key})

    def toggle_row(self, row: Any) -> "SelectionModel":
        return self.toggle(self._key_of(row))

    def select(self, keys: Iterable[Hashable]) -> "SelectionModel":
        return self._with_keys(self._keys | frozenset(keys))

    def deselect(self, keys: Iterable[Hashable]) -> "SelectionModel":
        return self._with_keys(self._keys - frozenset(keys))

    def clear(self) -> "SelectionModel":
        return self._with_keys(())

    # -------------------------------------------------------------------------
    # Page-scoped selection
    # -------------------------------------------------------------------------

    def selected_count(self, page_rows: Sequence[Any]) -> int:
        """Number of rows in page_rows that are selected."""
        return sum(1 for row in page_rows if self._key_of(row) in self._keys)

    def all_selected(self, page_rows: Sequence[Any]) -> bool:
        """True if the page is non-empty and every row on it is selected."""
        return bool(page_rows) and self.selected_count(page_rows) == len(page_rows)

    def indeterminate(self, page_rows: Sequence[Any]) -> bool:
        """True if some, but not all, rows on the page are selected."""
        count = self.selected_count(page_rows)
        return 0 < count < len(page_rows)

    def header_state(self, page_rows: Sequence[Any]) -> str:
        """
        State of the "select all" header checkbox for the visible page.

        Returns:
            CHECKED, INDETERMINATE or UNCHECKED
        """
        if self.all_selected(page_rows):
            return CHECKED
        if self.indeterminate(page_rows):
            return INDETERMINATE
        return UNCHECKED

    def select_visible(self, page_rows: Sequence[Any]) -> "SelectionModel":
        """
        Toggle the selection of the visible page as a whole.

        If every row of page_rows is selected they are all deselected;
        otherwise the unselected ones are selected. Keys of rows that are
        not on the page are never touched.
        """
        page_keys = [self._key_of(row) for row in page_rows]
        if all(key in self._keys for key in page_keys):
            return self.deselect(page_keys)
        return self.select(page_keys)

    # -------------------------------------------------------------------------
    # Dataset reconciliation
    # -------------------------------------------------------------------------

    def reconcile(self, live_keys: Iterable[Hashable]) -> "SelectionModel":
        """
        Drop selected keys that no longer exist in the source dataset.

        Never adds keys.

        Args:
            live_keys: Keys of every row in the current dataset

        Returns:
            Selection restricted to live keys
        """
        live = live_keys if isinstance(live_keys, (set, frozenset)) else set(live_keys)
        stale = self._keys - live
        if stale:
            LOG.debug("Dropping %d stale selected key(s)", len(stale))
        return self._with_keys(self._keys & live)

    def selected_rows(self, rows: Iterable[Any]) -> List[Any]:
        """Return the selected rows of a dataset, in dataset order."""
        return [row for row in rows if self._key_of(row) in self._keys]

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._keys

    def __repr__(self) -> str:
        return f"SelectionModel(selected={sorted(self._keys, key=repr)})"
