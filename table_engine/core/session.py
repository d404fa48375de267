"""Per-session storage of table state in Streamlit's session_state."""

from typing import TYPE_CHECKING, Any, Dict, Optional

import numpy as np

from .state import TableSnapshot

if TYPE_CHECKING:
    from ..components.table import Table


class TableSession:
    """
    Keeps table state snapshots for the current Streamlit session.

    Streamlit reruns the script on every interaction, so table objects are
    rebuilt each time. TableSession stores each table's TableSnapshot in
    `st.session_state` under its table id, letting a rebuilt table pick up
    where it left off. Session state lives only as long as the browser
    session, so every new session starts from defaults.

    Each table id owns an independent snapshot; there is no shared state
    between tables.
    """

    def __init__(self, session_key: str = "table_engine_state"):
        """
        Initialize the TableSession.

        Args:
            session_key: Key to use in Streamlit session_state. Use different
                keys for independent groups of tables.
        """
        self._session_key = session_key
        self._ensure_session_state()

    def _ensure_session_state(self) -> None:
        """Ensure session state is initialized."""
        import streamlit as st

        if self._session_key not in st.session_state:
            st.session_state[self._session_key] = {
                "counter": 0,
                "id": float(np.random.random()),
                "tables": {},
            }

    @property
    def _state(self) -> Dict[str, Any]:
        """Get the internal state dict from session_state."""
        import streamlit as st

        self._ensure_session_state()
        return st.session_state[self._session_key]

    @property
    def session_id(self) -> float:
        return self._state["id"]

    @property
    def counter(self) -> int:
        """Number of stored changes in this session."""
        return self._state["counter"]

    def load(self, table_id: str) -> Optional[TableSnapshot]:
        """
        Get the stored snapshot of a table.

        Args:
            table_id: The table identifier

        Returns:
            The snapshot, or None if nothing was stored yet
        """
        return self._state["tables"].get(table_id)

    def save(self, table_id: str, snapshot: TableSnapshot) -> bool:
        """
        Store a table snapshot.

        Returns:
            True if the stored snapshot changed, False otherwise
        """
        if self._state["tables"].get(table_id) == snapshot:
            return False
        self._state["tables"][table_id] = snapshot
        self._state["counter"] += 1
        return True

    def discard(self, table_id: str) -> bool:
        """
        Forget a table's snapshot, e.g. when the table is torn down.

        Returns:
            True if a snapshot was removed
        """
        if table_id in self._state["tables"]:
            del self._state["tables"][table_id]
            self._state["counter"] += 1
            return True
        return False

    def bind(self, table_id: str, table: "Table") -> bool:
        """
        Restore a table from its stored snapshot, if any.

        Returns:
            True if a snapshot was restored
        """
        snapshot = self.load(table_id)
        if snapshot is None:
            return False
        table.restore(snapshot)
        return True

    def store(self, table_id: str, table: "Table") -> bool:
        """Save the current state of a table."""
        return self.save(table_id, table.snapshot())

    def clear(self) -> None:
        """Forget all tables and reset the counter."""
        self._state["tables"] = {}
        self._state["counter"] = 0

    def __repr__(self) -> str:
        return (
            f"TableSession(session_key='{self._session_key}', "
            f"counter={self.counter}, "
            f"tables={sorted(self._state['tables'])})"
        )
