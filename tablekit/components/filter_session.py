"""Open/close/apply/reset lifecycle of a table's filter panel."""

from enum import Enum
from typing import Callable, Optional


class SessionState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class FilterSession:
    """
    Visibility state machine for a side panel hosting custom filter controls.

    The session knows nothing about filter values. Hosts stage edits in
    their own form and commit them from ``on_apply``, so the live table
    state only changes when the user applies.

    Example:
        session = FilterSession(on_apply=commit_form, on_reset=clear_form)
        session.toggle()   # open
        session.apply()    # commit_form(), then closed
    """

    def __init__(
        self,
        on_apply: Optional[Callable[[], None]] = None,
        on_reset: Optional[Callable[[], None]] = None,
        close_on_reset: bool = False,
    ):
        """
        Initialize the session in the closed state.

        Args:
            on_apply: Commit callback run by apply() before closing
            on_reset: Callback run by reset()
            close_on_reset: Whether reset() also closes the panel
        """
        self._state = SessionState.CLOSED
        self._on_apply = on_apply
        self._on_reset = on_reset
        self._close_on_reset = close_on_reset

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is SessionState.OPEN

    @property
    def can_apply(self) -> bool:
        """Whether an Apply action should be offered."""
        return self._on_apply is not None

    @property
    def can_reset(self) -> bool:
        return self._on_reset is not None

    def open(self) -> None:
        self._state = SessionState.OPEN

    def close(self) -> None:
        self._state = SessionState.CLOSED

    def toggle(self) -> None:
        self._state = SessionState.CLOSED if self.is_open else SessionState.OPEN

    def apply(self) -> None:
        """Run the commit callback, then close the panel."""
        if self._on_apply is not None:
            self._on_apply()
        self.close()

    def reset(self) -> None:
        """Run the reset callback; close only if configured to."""
        if self._on_reset is not None:
            self._on_reset()
        if self._close_on_reset:
            self.close()

    def __repr__(self) -> str:
        return f"FilterSession(state={self._state.value})"
