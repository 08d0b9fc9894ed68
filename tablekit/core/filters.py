"""Column filter map and global search state."""

from typing import Any, Dict, List, Optional, Tuple

from .columns import ColumnDef
from .models import ActiveFilterView, ColumnFilter


def _is_empty_filter_value(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return all(_is_empty_filter_value(v) for v in value)
    return False


def _freeze_filter_value(value: Any) -> Any:
    # Stored values must not alias host-owned mutable containers
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_filter_value(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(value)
    return value


class FilterModel:
    """
    Per-column filters plus one global free-text filter.

    Column filters are kept in insertion order, one per column. Setting a
    filter to None, "" or a list of empty values removes it. Unknown and
    non-filterable columns are ignored.
    """

    def __init__(
        self,
        columns: Dict[str, ColumnDef],
        column_filters: Tuple[ColumnFilter, ...] = (),
        global_filter: str = "",
    ):
        self._columns = columns
        self._column_filters: Dict[str, Any] = {}
        self._global_filter = ""
        self.restore(column_filters, global_filter)

    @property
    def column_filters(self) -> Tuple[ColumnFilter, ...]:
        return tuple(
            ColumnFilter(column_id, value)
            for column_id, value in self._column_filters.items()
        )

    @property
    def global_filter(self) -> str:
        return self._global_filter

    @property
    def has_column_filters(self) -> bool:
        return bool(self._column_filters)

    @property
    def has_active_filters(self) -> bool:
        return bool(self._column_filters) or bool(self._global_filter)

    def get_filter(self, column_id: str) -> Optional[Any]:
        return self._column_filters.get(column_id)

    def set_column_filter(self, column_id: str, value: Any) -> bool:
        """
        Set (or remove, for empty values) the filter of one column.

        Lists and sets are stored as tuples and frozensets, so a host mutating
        its own list afterwards does not change the stored filter.

        Returns:
            True if the filter state changed
        """
        column = self._columns.get(column_id)
        if column is None or not column.filterable:
            return False
        if _is_empty_filter_value(value):
            return self.remove_filter(column_id)
        value = _freeze_filter_value(value)
        if column_id in self._column_filters and self._column_filters[column_id] == value:
            return False
        self._column_filters[column_id] = value
        return True

    def remove_filter(self, column_id: str) -> bool:
        if column_id not in self._column_filters:
            return False
        del self._column_filters[column_id]
        return True

    def set_global_filter(self, query: Optional[str]) -> bool:
        query = "" if query is None else str(query)
        if query == self._global_filter:
            return False
        self._global_filter = query
        return True

    def clear_column_filters(self) -> bool:
        """Drop every column filter, keeping the global filter."""
        if not self._column_filters:
            return False
        self._column_filters = {}
        return True

    def clear_all(self) -> bool:
        """Drop every column filter and the global filter in one update."""
        if not self.has_active_filters:
            return False
        self._column_filters = {}
        self._global_filter = ""
        return True

    def restore(self, column_filters: Tuple[ColumnFilter, ...], global_filter: str) -> None:
        """Replace the whole filter state, skipping invalid entries."""
        self._column_filters = {}
        for column_filter in column_filters:
            self.set_column_filter(column_filter.column_id, column_filter.value)
        self._global_filter = global_filter or ""

    def active_filter_views(self) -> List[ActiveFilterView]:
        """Chip projections of the column filters, in insertion order."""
        views: List[ActiveFilterView] = []
        for column_id, value in self._column_filters.items():
            column = self._columns.get(column_id)
            label = column.label if column is not None else column_id
            views.append(ActiveFilterView(id=column_id, label=label, value=_display_value(value)))
        return views


def _display_value(value: Any) -> str:
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join("" if v is None else str(v) for v in value)
    return str(value)
