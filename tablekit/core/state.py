"""Per-session storage of table engines across Streamlit reruns."""

from typing import Any, Callable, Dict, List, Optional

import numpy as np

from .base import BaseTableEngine
from .config import debug_log

# Module-level default store
_default_store: Optional["TableStateStore"] = None


def get_default_store() -> "TableStateStore":
    """
    Get or create the default shared TableStateStore.

    Returns:
        The default TableStateStore instance
    """
    global _default_store
    if _default_store is None:
        _default_store = TableStateStore()
    return _default_store


def reset_default_store() -> None:
    """Reset the default store (useful for testing)."""
    global _default_store
    _default_store = None


class TableStateStore:
    """
    Keeps one engine per table id in Streamlit's session_state.

    Streamlit re-executes the whole script on every interaction. Engines
    created through get_or_create() are built once per session and returned
    unchanged on later reruns, so page, sort and filter state survive.

    Features:
        - Session ID for multi-tab/session safety
        - Change counter bumped whenever an engine is added or dropped
        - Dropped engines are disposed so no pending notification fires
    """

    def __init__(self, session_key: str = "tablekit_state"):
        """
        Initialize the store.

        Args:
            session_key: Key to use in Streamlit session_state. Use different
                keys for independent groups of tables.
        """
        self._session_key = session_key
        self._ensure_session_state()

    def _ensure_session_state(self) -> None:
        import streamlit as st

        if self._session_key not in st.session_state:
            st.session_state[self._session_key] = {
                "counter": 0,
                "id": float(np.random.random()),
                "engines": {},
            }

    @property
    def _state(self) -> Dict[str, Any]:
        import streamlit as st

        self._ensure_session_state()
        return st.session_state[self._session_key]

    @property
    def session_id(self) -> float:
        return self._state["id"]

    @property
    def counter(self) -> int:
        return self._state["counter"]

    def get_or_create(
        self,
        table_id: str,
        factory: Callable[[], BaseTableEngine],
    ) -> BaseTableEngine:
        """
        Return the engine stored under table_id, creating it on first use.

        A stored engine that was disposed is replaced by a fresh one.

        Args:
            table_id: Unique id of the table within the session
            factory: Zero-argument callable building the engine

        Returns:
            The session's engine for this table
        """
        engines = self._state["engines"]
        engine = engines.get(table_id)
        if engine is None or engine.disposed:
            engine = factory()
            engines[table_id] = engine
            self._state["counter"] += 1
            debug_log("TABLE", f"Created {type(engine).__name__} for '{table_id}'")
        return engine

    def get(self, table_id: str) -> Optional[BaseTableEngine]:
        return self._state["engines"].get(table_id)

    def drop(self, table_id: str) -> bool:
        """
        Dispose and forget the engine stored under table_id.

        Returns:
            True if an engine was dropped, False if none was stored
        """
        engine = self._state["engines"].pop(table_id, None)
        if engine is None:
            return False
        engine.dispose()
        self._state["counter"] += 1
        return True

    def clear(self) -> None:
        """Dispose and forget every stored engine."""
        for table_id in list(self._state["engines"]):
            self.drop(table_id)

    def table_ids(self) -> List[str]:
        return list(self._state["engines"].keys())

    def __repr__(self) -> str:
        return (
            f"TableStateStore(session_key='{self._session_key}', "
            f"tables={self.table_ids()})"
        )
