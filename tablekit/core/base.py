"""Base class shared by the client- and server-mode table engines."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from .columns import ColumnDef, index_columns
from .config import debug_log, get_default_page_size
from .filters import FilterModel
from .models import (
    ActiveFilterView,
    PaginationState,
    PaginationSummary,
    SortDescriptor,
    SortDirection,
    TableState,
)
from .pagination import PaginationModel
from .sorting import SortModel

STATUS_LOADING = "loading"
STATUS_EMPTY = "empty"
STATUS_READY = "ready"


class BaseTableEngine(ABC):
    """
    Abstract base class for table engines.

    An engine owns the pagination, sort and filter models of one table and
    exposes the operations a table UI triggers. Subclasses decide what a
    change means: the client engine recomputes its row window, the server
    engine notifies the host so it can fetch.

    Attributes:
        _columns: Ordered column lookup by id
        _pagination: PaginationModel
        _sorting: SortModel
        _filters: FilterModel holding the live (displayed) filter values
        _session: FilterSession controlling the custom filter panel
        _disposed: True once dispose() was called
        _engine_mode: Class-level mode name set by register_engine()
    """

    _engine_mode: str = ""

    def __init__(
        self,
        columns: Sequence[ColumnDef],
        initial_page_size: Optional[int] = None,
        page_size_options: Optional[Sequence[int]] = None,
        initial_state: Optional[Union[TableState, Dict[str, Any]]] = None,
        on_apply_filters: Optional[Callable[[], None]] = None,
        on_reset_filters: Optional[Callable[[], None]] = None,
        close_filters_on_reset: bool = False,
    ):
        """
        Initialize the engine.

        Args:
            columns: Column definitions (static configuration)
            initial_page_size: Rows per page; defaults to TABLEKIT_PAGE_SIZE
            page_size_options: Page sizes offered to the user
            initial_state: Optional TableState (or its dict form) to start
                from instead of the defaults. Its page size wins over
                initial_page_size.
            on_apply_filters: Called when the filter panel is applied
            on_reset_filters: Called after the filter panel reset cleared the
                column filters
            close_filters_on_reset: Close the filter panel on reset

        Raises:
            ValueError: If column ids are not unique or the page size is not
                positive
        """
        from ..components.filter_session import FilterSession

        self._columns: Dict[str, ColumnDef] = index_columns(columns)
        if initial_page_size is None:
            initial_page_size = get_default_page_size()

        self._pagination = PaginationModel(
            page_size=initial_page_size,
            page_size_options=page_size_options,
        )
        self._sorting = SortModel(self._columns)
        self._filters = FilterModel(self._columns)
        self._on_reset_filters = on_reset_filters
        self._session = FilterSession(
            on_apply=on_apply_filters,
            on_reset=self._handle_filter_reset,
            close_on_reset=close_filters_on_reset,
        )
        self._disposed = False

        if initial_state is not None:
            if isinstance(initial_state, dict):
                initial_state = TableState.from_dict(initial_state)
            self._restore_state(initial_state)

    # ------------------------------------------------------------------
    # Hooks implemented by subclasses
    # ------------------------------------------------------------------

    @abstractmethod
    def _on_pagination_change(self) -> None:
        """React to a changed page index or page size."""
        pass

    @abstractmethod
    def _on_sort_change(self) -> None:
        """React to a changed sort descriptor."""
        pass

    @abstractmethod
    def _on_filter_change(self) -> None:
        """React to a changed column filter or global filter."""
        pass

    @abstractmethod
    def _total_rows(self) -> int:
        """Row count across all pages, for the pagination readout."""
        pass

    @abstractmethod
    def _is_loading(self) -> bool:
        pass

    @abstractmethod
    def _has_rows(self) -> bool:
        """Whether the current page has any rows to show."""
        pass

    def _on_dispose(self) -> None:
        """Release resources. Called once from dispose()."""
        pass

    # ------------------------------------------------------------------
    # State and read models
    # ------------------------------------------------------------------

    @property
    def columns(self) -> List[ColumnDef]:
        return list(self._columns.values())

    def get_column(self, column_id: str) -> Optional[ColumnDef]:
        return self._columns.get(column_id)

    @property
    def state(self) -> TableState:
        """Snapshot of the live state (filters as currently displayed)."""
        return TableState(
            pagination=self._pagination.state,
            sorting=self._sorting.descriptor,
            column_filters=self._filters.column_filters,
            global_filter=self._filters.global_filter,
        )

    @property
    def pagination(self) -> PaginationState:
        return self._pagination.state

    @property
    def page_count(self) -> int:
        return self._pagination.page_count

    @property
    def page_size_options(self) -> Tuple[int, ...]:
        return self._pagination.page_size_options

    @property
    def can_previous_page(self) -> bool:
        return self._pagination.can_previous_page

    @property
    def can_next_page(self) -> bool:
        return self._pagination.can_next_page

    @property
    def sorting(self) -> Optional[SortDescriptor]:
        return self._sorting.descriptor

    def sort_direction(self, column_id: str) -> Optional[SortDirection]:
        return self._sorting.direction_for(column_id)

    @property
    def global_filter(self) -> str:
        return self._filters.global_filter

    @property
    def active_filters(self) -> List[ActiveFilterView]:
        """Removable chips for the active column filters."""
        return self._filters.active_filter_views()

    @property
    def has_active_filters(self) -> bool:
        """Whether any column filter is set (drives the filter button badge)."""
        return self._filters.has_column_filters

    @property
    def show_clear_all(self) -> bool:
        """The "Clear all" action is offered once more than one chip shows."""
        return len(self._filters.column_filters) > 1

    @property
    def pagination_summary(self) -> PaginationSummary:
        return self._pagination.summary(self._total_rows())

    @property
    def is_loading(self) -> bool:
        return self._is_loading()

    @property
    def status(self) -> str:
        """
        Which placeholder the host should render.

        Returns:
            "loading" while the host is fetching, "empty" when loaded without
            rows, "ready" otherwise
        """
        if self._is_loading():
            return STATUS_LOADING
        if not self._has_rows():
            return STATUS_EMPTY
        return STATUS_READY

    @property
    def skeleton_rows(self) -> int:
        """Number of placeholder rows to draw while loading."""
        return self._pagination.state.page_size

    @property
    def filter_session(self):
        return self._session

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ------------------------------------------------------------------
    # Pagination operations
    # ------------------------------------------------------------------

    def first_page(self) -> PaginationState:
        return self._paginate(self._pagination.first_page)

    def previous_page(self) -> PaginationState:
        return self._paginate(self._pagination.previous_page)

    def next_page(self) -> PaginationState:
        return self._paginate(self._pagination.next_page)

    def last_page(self) -> PaginationState:
        return self._paginate(self._pagination.last_page)

    def set_page_index(self, page_index: int) -> PaginationState:
        return self._paginate(lambda: self._pagination.set_page_index(page_index))

    def set_page_size(self, page_size: int) -> PaginationState:
        """Change rows per page and return to the first page (<= 0 ignored)."""
        return self._paginate(lambda: self._pagination.set_page_size(page_size))

    def _paginate(self, operation: Callable[[], PaginationState]) -> PaginationState:
        if self._disposed:
            return self._pagination.state
        before = self._pagination.state
        after = operation()
        if after != before:
            debug_log("TABLE", f"Pagination {before} -> {after}")
            self._on_pagination_change()
        return self._pagination.state

    # ------------------------------------------------------------------
    # Sort operations
    # ------------------------------------------------------------------

    def toggle_sort(self, column_id: str) -> Optional[SortDescriptor]:
        """Cycle a column through unsorted, ascending and descending."""
        return self._sort(lambda: self._sorting.toggle_sort(column_id))

    def set_sort(
        self,
        column_id: str,
        direction: Union[SortDirection, str] = SortDirection.ASC,
    ) -> Optional[SortDescriptor]:
        return self._sort(lambda: self._sorting.set_sort(column_id, direction))

    def clear_sort(self) -> Optional[SortDescriptor]:
        return self._sort(self._sorting.clear_sort)

    def _sort(self, operation: Callable[[], Any]) -> Optional[SortDescriptor]:
        if self._disposed:
            return self._sorting.descriptor
        before = self._sorting.descriptor
        operation()
        if self._sorting.descriptor != before:
            debug_log("TABLE", f"Sorting {before} -> {self._sorting.descriptor}")
            self._on_sort_change()
        return self._sorting.descriptor

    # ------------------------------------------------------------------
    # Filter operations
    # ------------------------------------------------------------------

    def set_column_filter(self, column_id: str, value: Any) -> bool:
        """Set a column filter; None or "" removes it. Returns True on change."""
        return self._filter(lambda: self._filters.set_column_filter(column_id, value))

    def remove_filter(self, column_id: str) -> bool:
        return self._filter(lambda: self._filters.remove_filter(column_id))

    def set_global_filter(self, query: Optional[str]) -> bool:
        return self._filter(lambda: self._filters.set_global_filter(query))

    def clear_all_filters(self) -> bool:
        """Clear column filters and the global filter as one change."""
        return self._filter(self._filters.clear_all)

    def clear_column_filters(self) -> bool:
        return self._filter(self._filters.clear_column_filters)

    def _filter(self, operation: Callable[[], bool]) -> bool:
        if self._disposed:
            return False
        changed = operation()
        if changed:
            debug_log(
                "TABLE",
                f"Filters now {len(self._filters.column_filters)} column filter(s), "
                f"global={self._filters.global_filter!r}",
            )
            self._on_filter_change()
        return changed

    # ------------------------------------------------------------------
    # Filter panel
    # ------------------------------------------------------------------

    def open_filters(self) -> None:
        self._session.open()

    def close_filters(self) -> None:
        self._session.close()

    def toggle_filters(self) -> None:
        self._session.toggle()

    def apply_filters(self) -> None:
        """Commit the filter panel (host callback) and close it."""
        if self._disposed:
            return
        self._session.apply()

    def reset_filters(self) -> None:
        """Reset the filter panel: clear column filters, notify the host."""
        if self._disposed:
            return
        self._session.reset()

    def _handle_filter_reset(self) -> None:
        if self._disposed:
            return
        self.clear_column_filters()
        if self._on_reset_filters is not None:
            self._on_reset_filters()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def dispose(self) -> None:
        """
        Detach the engine from its host.

        Pending notifications are cancelled and later operations become
        no-ops, so no callback reaches a host that has gone away.
        """
        if self._disposed:
            return
        self._disposed = True
        self._on_dispose()
        debug_log("TABLE", f"Disposed {type(self).__name__}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def _restore_state(self, state: TableState) -> None:
        self._pagination.reset(state.pagination)
        if state.sorting is not None:
            self._sorting.set_sort(state.sorting.column_id, state.sorting.direction)
        self._filters.restore(state.column_filters, state.global_filter)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(columns={list(self._columns)}, "
            f"pagination={self._pagination.state}, sorting={self._sorting.descriptor}, "
            f"filters={len(self._filters.column_filters)})"
        )
