"""Client-side table engine computing the row window in memory."""

from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..core.base import BaseTableEngine
from ..core.columns import ColumnDef
from ..core.config import debug_log
from ..core.models import PageResult, PaginationState, TableState
from ..core.pagination import clamp_page_index, compute_page_count, page_bounds
from ..core.registry import register_engine
from ..preprocessing.datasets import Dataset, rows_from_dataset
from ..preprocessing.filtering import filter_rows
from ..preprocessing.sorting import sort_rows


@register_engine("client")
class ClientTableEngine(BaseTableEngine):
    """
    Table engine holding the full dataset and computing pages locally.

    Every mutation recomputes the visible window synchronously through the
    pipeline filter -> sort -> paginate, so ``result`` is always consistent
    with ``state``. Filter and sort changes return to the first page; a
    shrinking dataset clamps the page index.

    Example:
        engine = ClientTableEngine(
            columns=[ColumnDef("name", "Name"), ColumnDef("status", "Status")],
            data=users,
            on_change=lambda result: render(result.rows),
        )
        engine.set_global_filter("ali")
        engine.toggle_sort("name")
        engine.next_page()
    """

    def __init__(
        self,
        columns: Sequence[ColumnDef],
        data: Optional[Dataset] = None,
        on_change: Optional[Callable[[PageResult], None]] = None,
        initial_page_size: Optional[int] = None,
        page_size_options: Optional[Sequence[int]] = None,
        initial_state: Optional[Union[TableState, Dict[str, Any]]] = None,
        on_apply_filters: Optional[Callable[[], None]] = None,
        on_reset_filters: Optional[Callable[[], None]] = None,
        close_filters_on_reset: bool = False,
    ):
        """
        Initialize the engine and compute the first window.

        Args:
            columns: Column definitions
            data: Full dataset (sequence of rows, polars or pandas frame)
            on_change: Observer called with each recomputed PageResult
                (not called for the initial computation)
            initial_page_size: Rows per page
            page_size_options: Page sizes offered to the user
            initial_state: Optional starting TableState or dict
            on_apply_filters: Called when the filter panel is applied
            on_reset_filters: Called after the filter panel was reset
            close_filters_on_reset: Close the filter panel on reset
        """
        self._rows: List[Any] = rows_from_dataset(data)
        self._on_change = on_change
        self._result = PageResult()
        super().__init__(
            columns=columns,
            initial_page_size=initial_page_size,
            page_size_options=page_size_options,
            initial_state=initial_state,
            on_apply_filters=on_apply_filters,
            on_reset_filters=on_reset_filters,
            close_filters_on_reset=close_filters_on_reset,
        )
        self._result = self.compute()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def result(self) -> PageResult:
        """The current row window."""
        return self._result

    @property
    def rows(self):
        return self._result.rows

    @property
    def total_rows(self) -> int:
        return self._result.total_rows

    @property
    def data(self) -> List[Any]:
        return list(self._rows)

    def set_data(self, data: Optional[Dataset]) -> PageResult:
        """Replace the dataset and recompute (the page index is clamped)."""
        if self._disposed:
            return self._result
        self._rows = rows_from_dataset(data)
        return self._refresh()

    def compute(self, dataset: Optional[Dataset] = None) -> PageResult:
        """
        Compute the visible window for a dataset.

        Applies the active filters, then the sort, then pagination. For the
        engine's own dataset the page count is updated from the filtered row
        total and the page index clamped into range. Another dataset is
        windowed with a locally clamped page index and leaves the engine's
        pagination untouched.

        Args:
            dataset: Rows to compute over; defaults to the engine's dataset

        Returns:
            PageResult with the page rows, the post-filter total and the
            page count
        """
        rows = self._rows if dataset is None else rows_from_dataset(dataset)

        filtered = filter_rows(
            rows,
            self._columns,
            self._filters.column_filters,
            self._filters.global_filter,
        )
        ordered = sort_rows(filtered, self._columns, self._sorting.descriptor)

        total_rows = len(ordered)
        page_size = self._pagination.state.page_size
        page_count = compute_page_count(total_rows, page_size)
        if dataset is None:
            self._pagination.set_total_rows(total_rows)
            page_index = self._pagination.state.page_index
        else:
            page_index = clamp_page_index(self._pagination.state.page_index, page_count)
        start, end = page_bounds(PaginationState(page_index=page_index, page_size=page_size))

        return PageResult(
            rows=tuple(ordered[start:end]),
            total_rows=total_rows,
            page_count=page_count,
        )

    # ------------------------------------------------------------------
    # BaseTableEngine hooks
    # ------------------------------------------------------------------

    def _on_pagination_change(self) -> None:
        self._refresh()

    def _on_sort_change(self) -> None:
        self._pagination.first_page()
        self._refresh()

    def _on_filter_change(self) -> None:
        self._pagination.first_page()
        self._refresh()

    def _total_rows(self) -> int:
        return self._result.total_rows

    def _is_loading(self) -> bool:
        return False

    def _has_rows(self) -> bool:
        return self._result.total_rows > 0

    def _refresh(self) -> PageResult:
        self._result = self.compute()
        debug_log(
            "TABLE",
            f"Client window page {self._pagination.state.page_index + 1}/"
            f"{max(self._result.page_count, 1)}: {len(self._result.rows)} of "
            f"{self._result.total_rows:,} rows",
        )
        if self._on_change is not None:
            self._on_change(self._result)
        return self._result
