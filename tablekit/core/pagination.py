"""Page index/size arithmetic and navigation."""

import math
from typing import Optional, Sequence, Tuple

from .config import DEFAULT_PAGE_SIZE_OPTIONS
from .models import PaginationState, PaginationSummary


def compute_page_count(total_rows: int, page_size: int) -> int:
    """
    Number of pages needed for ``total_rows``.

    Returns 0 for an empty table (not 1); callers rendering "Page N of M"
    should use PaginationSummary.display_page_count.
    """
    if total_rows <= 0 or page_size <= 0:
        return 0
    return math.ceil(total_rows / page_size)


def clamp_page_index(page_index: int, page_count: int) -> int:
    """Clamp to ``[0, max(page_count - 1, 0)]``."""
    return min(max(page_index, 0), max(page_count - 1, 0))


def page_bounds(state: PaginationState) -> Tuple[int, int]:
    """Start/end row offsets (end exclusive) of the current page."""
    start = state.page_index * state.page_size
    return start, start + state.page_size


class PaginationModel:
    """
    Holds the current PaginationState and the page count it is clamped to.

    Every navigation method stores and returns a new state. Moving past a
    boundary leaves the state unchanged instead of raising.
    """

    def __init__(
        self,
        page_size: int,
        page_index: int = 0,
        page_size_options: Optional[Sequence[int]] = None,
    ):
        """
        Initialize the model.

        Args:
            page_size: Initial rows per page
            page_index: Initial zero-based page index (clamped once a page
                count is known)
            page_size_options: Page sizes offered to the user

        Raises:
            ValueError: If page_size is not positive
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._state = PaginationState(page_index=max(page_index, 0), page_size=page_size)
        self._page_count = 0
        self._page_size_options: Tuple[int, ...] = tuple(
            page_size_options or DEFAULT_PAGE_SIZE_OPTIONS
        )

    @property
    def state(self) -> PaginationState:
        return self._state

    @property
    def page_count(self) -> int:
        return self._page_count

    @property
    def page_size_options(self) -> Tuple[int, ...]:
        return self._page_size_options

    @property
    def can_previous_page(self) -> bool:
        return self._state.page_index > 0

    @property
    def can_next_page(self) -> bool:
        return self._state.page_index < self._page_count - 1

    def set_page_count(self, page_count: int) -> PaginationState:
        """Set the page count and clamp the page index into range."""
        self._page_count = max(int(page_count), 0)
        return self._update(page_index=self._state.page_index)

    def set_total_rows(self, total_rows: int) -> PaginationState:
        """Derive the page count from a row total and clamp."""
        return self.set_page_count(compute_page_count(total_rows, self._state.page_size))

    def first_page(self) -> PaginationState:
        return self._update(page_index=0)

    def previous_page(self) -> PaginationState:
        return self._update(page_index=self._state.page_index - 1)

    def next_page(self) -> PaginationState:
        return self._update(page_index=self._state.page_index + 1)

    def last_page(self) -> PaginationState:
        return self._update(page_index=self._page_count - 1)

    def set_page_index(self, page_index: int) -> PaginationState:
        return self._update(page_index=page_index)

    def set_page_size(self, page_size: int) -> PaginationState:
        """
        Change the page size and go back to the first page.

        Non-positive sizes are ignored. The page count is rescaled from the
        previous one only as an estimate; engines recompute it from their row
        totals.
        """
        if page_size <= 0:
            return self._state
        total_estimate = self._page_count * self._state.page_size
        self._state = PaginationState(page_index=0, page_size=page_size)
        self._page_count = compute_page_count(total_estimate, page_size)
        return self._state

    def reset(self, state: PaginationState) -> PaginationState:
        """
        Replace the state wholesale, e.g. from a host-supplied initial state.

        The page index is kept as given while the page count is still unknown
        (0) and clamped otherwise. A non-positive page size keeps the current
        size.
        """
        page_size = state.page_size if state.page_size > 0 else self._state.page_size
        self._state = PaginationState(page_index=max(state.page_index, 0), page_size=page_size)
        if self._page_count > 0:
            return self._update(page_index=self._state.page_index)
        return self._state

    def summary(self, total_rows: int) -> PaginationSummary:
        """
        Build the "Showing X to Y of Z" readout for ``total_rows``.

        Args:
            total_rows: Rows across all pages (post-filter in client mode)

        Returns:
            PaginationSummary for the current state
        """
        start, end = page_bounds(self._state)
        total_rows = max(total_rows, 0)
        return PaginationSummary(
            page_index=self._state.page_index,
            page_size=self._state.page_size,
            page_count=self._page_count,
            total_rows=total_rows,
            start_row=start + 1 if total_rows > 0 else 0,
            end_row=min(end, total_rows),
            can_previous_page=self.can_previous_page,
            can_next_page=self.can_next_page,
        )

    def _update(self, page_index: int) -> PaginationState:
        clamped = clamp_page_index(page_index, self._page_count)
        if clamped != self._state.page_index:
            self._state = PaginationState(page_index=clamped, page_size=self._state.page_size)
        return self._state

    def __repr__(self) -> str:
        return (
            f"PaginationModel(page_index={self._state.page_index}, "
            f"page_size={self._state.page_size}, page_count={self._page_count})"
        )
