"""Server-side table engine delegating data fetching to the host."""

from typing import Any, Callable, Dict, Hashable, Optional, Sequence, Tuple, Union

from ..core.base import BaseTableEngine
from ..core.columns import ColumnDef
from ..core.config import debug_log, get_debounce_ms
from ..core.debounce import DebounceScheduler
from ..core.models import ColumnFilter, PaginationState, TableState
from ..core.registry import register_engine

_FILTERS_KEY = "filters"

SchedulerFactory = Callable[[Callable[[Hashable, Any], None]], DebounceScheduler]


@register_engine("server")
class ServerTableEngine(BaseTableEngine):
    """
    Table engine that tracks intended state and lets the host fetch rows.

    The engine never looks at a dataset. Each change produces a new
    TableState passed to ``on_state_change``:

    - page and sort changes are emitted immediately;
    - filter and search changes are debounced (one coalesced key for all
      filters) and, once committed, go back to the first page.

    Immediate emissions carry the last committed filters, so a filter typed
    just before a page click is delivered later with its own notification.
    Construction never emits; the host performs its own initial fetch.

    Every emitted snapshot has a higher ``sequence`` than the previous one.
    Hosts pass it back to set_data() so responses to superseded requests are
    discarded (last write wins).

    Example:
        engine = ServerTableEngine(
            columns=columns,
            on_state_change=lambda state: submit_fetch(state),
            page_count=initial_page_count,
        )

        # When a fetch for `state` completes:
        engine.set_data(rows, page_count, sequence=state.sequence)
    """

    def __init__(
        self,
        columns: Sequence[ColumnDef],
        on_state_change: Callable[[TableState], None],
        data: Optional[Sequence[Any]] = None,
        page_count: int = 0,
        is_loading: bool = False,
        total_rows: Optional[int] = None,
        initial_page_size: Optional[int] = None,
        page_size_options: Optional[Sequence[int]] = None,
        initial_state: Optional[Union[TableState, Dict[str, Any]]] = None,
        debounce_ms: Optional[int] = None,
        scheduler_factory: Optional[SchedulerFactory] = None,
        on_apply_filters: Optional[Callable[[], None]] = None,
        on_reset_filters: Optional[Callable[[], None]] = None,
        close_filters_on_reset: bool = False,
    ):
        """
        Initialize the engine without notifying the host.

        Args:
            columns: Column definitions
            on_state_change: Called with each new TableState
            data: Rows of the current page, as fetched by the host
            page_count: Total pages reported by the host
            is_loading: Whether the host is currently fetching
            total_rows: Total matching rows if the host knows it; otherwise
                the readout uses ``page_count * page_size``
            initial_page_size: Rows per page
            page_size_options: Page sizes offered to the user
            initial_state: Optional starting TableState or dict
            debounce_ms: Filter debounce window; defaults to
                TABLEKIT_DEBOUNCE_MS (300 ms)
            scheduler_factory: Builds the scheduler from a flush callback.
                Defaults to the polling DebounceScheduler, driven through
                run_pending(); pass AsyncioDebounceScheduler for asyncio hosts.
            on_apply_filters: Called when the filter panel is applied
            on_reset_filters: Called after the filter panel was reset
            close_filters_on_reset: Close the filter panel on reset
        """
        self._on_state_change = on_state_change
        self._data: Tuple[Any, ...] = tuple(data or ())
        self._loading = is_loading
        self._host_total_rows = total_rows
        self._debounce_ms = get_debounce_ms() if debounce_ms is None else debounce_ms
        if scheduler_factory is None:
            scheduler_factory = DebounceScheduler
        self._scheduler = scheduler_factory(self._flush)
        self._sequence = 0
        self._last_emitted: Optional[TableState] = None

        super().__init__(
            columns=columns,
            initial_page_size=initial_page_size,
            page_size_options=page_size_options,
            initial_state=initial_state,
            on_apply_filters=on_apply_filters,
            on_reset_filters=on_reset_filters,
            close_filters_on_reset=close_filters_on_reset,
        )
        if page_count > 0:
            self._pagination.set_page_count(page_count)

        # Filters as last delivered to the host (the debounced view)
        self._committed_filters: Tuple[ColumnFilter, ...] = self._filters.column_filters
        self._committed_global = self._filters.global_filter
        self._mount_state = self._build_state(0)

    # ------------------------------------------------------------------
    # Host inputs
    # ------------------------------------------------------------------

    @property
    def data(self) -> Tuple[Any, ...]:
        return self._data

    @property
    def rows(self) -> Tuple[Any, ...]:
        return self._data

    @property
    def sequence(self) -> int:
        """Sequence token of the latest emitted snapshot (0 before any)."""
        return self._sequence

    @property
    def committed_state(self) -> TableState:
        """The state as last delivered (or deliverable) to the host."""
        return self._build_state(self._sequence)

    @property
    def has_pending_changes(self) -> bool:
        return self._scheduler.has_pending()

    def set_data(
        self,
        data: Sequence[Any],
        page_count: int,
        is_loading: bool = False,
        total_rows: Optional[int] = None,
        sequence: Optional[int] = None,
    ) -> bool:
        """
        Feed a fetch result back into the engine.

        The host's data and page count are authoritative; ``len(data)`` is not
        checked against the page size. If the page count leaves the current
        page out of range, the page index is clamped and the change emitted.

        Args:
            data: Rows of the current page
            page_count: Total pages for the current filters
            is_loading: Whether another fetch is still running
            total_rows: Total matching rows, if known
            sequence: Sequence of the TableState this data answers. Responses
                older than the latest emitted snapshot are discarded.

        Returns:
            True if the data was accepted, False if it was stale or the engine
            is disposed
        """
        if self._disposed:
            return False
        if sequence is not None and sequence < self._sequence:
            debug_log(
                "TABLE",
                f"Discarded stale response (sequence {sequence} < {self._sequence})",
            )
            return False

        self._data = tuple(data)
        self._loading = is_loading
        self._host_total_rows = total_rows

        before = self._pagination.state
        self._pagination.set_page_count(page_count)
        if self._pagination.state != before:
            self._emit()
        return True

    def set_loading(self, is_loading: bool) -> None:
        self._loading = is_loading

    def set_page_size(self, page_size: int) -> PaginationState:
        """
        Change rows per page and return to the first page (<= 0 ignored).

        With a host-supplied ``total_rows`` the page count is recomputed
        exactly; otherwise it stays an estimate until the next set_data().
        """
        return self._paginate(lambda: self._resize_pages(page_size))

    def run_pending(self) -> int:
        """Deliver debounced changes whose window elapsed (polling hosts)."""
        if self._disposed:
            return 0
        return self._scheduler.run_pending()

    def flush_pending(self) -> None:
        """Commit pending filter changes immediately, skipping the window."""
        if self._disposed or not self._scheduler.has_pending(_FILTERS_KEY):
            return
        self._scheduler.cancel(_FILTERS_KEY)
        self._commit_filters(self._filters.column_filters, self._filters.global_filter)

    # ------------------------------------------------------------------
    # BaseTableEngine hooks
    # ------------------------------------------------------------------

    def _on_pagination_change(self) -> None:
        self._emit()

    def _on_sort_change(self) -> None:
        self._emit()

    def _on_filter_change(self) -> None:
        self._scheduler.schedule(
            _FILTERS_KEY,
            (self._filters.column_filters, self._filters.global_filter),
            self._debounce_ms,
        )

    def _total_rows(self) -> int:
        if self._host_total_rows is not None:
            return self._host_total_rows
        return self._pagination.page_count * self._pagination.state.page_size

    def _is_loading(self) -> bool:
        return self._loading

    def _has_rows(self) -> bool:
        return len(self._data) > 0

    def _on_dispose(self) -> None:
        self._scheduler.cancel_all()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _flush(self, key: Hashable, value: Any) -> None:
        if self._disposed:
            return
        column_filters, global_filter = value
        self._commit_filters(column_filters, global_filter)

    def _resize_pages(self, page_size: int) -> PaginationState:
        state = self._pagination.set_page_size(page_size)
        if self._host_total_rows is not None:
            state = self._pagination.set_total_rows(self._host_total_rows)
        return state

    def _commit_filters(
        self,
        column_filters: Tuple[ColumnFilter, ...],
        global_filter: str,
    ) -> None:
        changed = (
            column_filters != self._committed_filters
            or global_filter != self._committed_global
        )
        self._committed_filters = column_filters
        self._committed_global = global_filter
        if changed:
            self._pagination.first_page()
        self._emit()

    def _build_state(self, sequence: int) -> TableState:
        return TableState(
            pagination=self._pagination.state,
            sorting=self._sorting.descriptor,
            column_filters=self._committed_filters,
            global_filter=self._committed_global,
            sequence=sequence,
        )

    def _emit(self) -> None:
        if self._disposed:
            return
        candidate = self._build_state(self._sequence + 1)
        if self._last_emitted is not None and candidate.same_content(self._last_emitted):
            return
        if self._last_emitted is None and candidate.same_content(self._mount_state):
            # Nothing differs from what the host fetched on mount
            return
        self._sequence = candidate.sequence
        self._last_emitted = candidate
        debug_log("TABLE", f"Emitting state #{candidate.sequence}: {candidate.to_dict()}")
        self._on_state_change(candidate)
