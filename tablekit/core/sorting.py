"""Single-column sort state with a three-state toggle cycle."""

from typing import Dict, Optional, Union

from .columns import ColumnDef
from .models import SortDescriptor, SortDirection


class SortModel:
    """
    Tracks the single active sort descriptor of a table.

    toggle_sort() cycles a column through unsorted -> asc -> desc -> unsorted.
    Toggling a different column replaces the active descriptor. Unknown and
    non-sortable columns are ignored.
    """

    def __init__(
        self,
        columns: Dict[str, ColumnDef],
        initial: Optional[SortDescriptor] = None,
    ):
        self._columns = columns
        self._descriptor: Optional[SortDescriptor] = None
        if initial is not None and self._can_sort(initial.column_id):
            self._descriptor = initial

    @property
    def descriptor(self) -> Optional[SortDescriptor]:
        return self._descriptor

    @property
    def is_sorted(self) -> bool:
        return self._descriptor is not None

    def direction_for(self, column_id: str) -> Optional[SortDirection]:
        """Sort direction shown on a column header, None when unsorted."""
        if self._descriptor is None or self._descriptor.column_id != column_id:
            return None
        return self._descriptor.direction

    def toggle_sort(self, column_id: str) -> Optional[SortDescriptor]:
        """
        Advance ``column_id`` one step through the toggle cycle.

        Returns:
            The new active descriptor (None when the table is unsorted)
        """
        if not self._can_sort(column_id):
            return self._descriptor

        current = self.direction_for(column_id)
        if current is None:
            self._descriptor = SortDescriptor(column_id, SortDirection.ASC)
        elif current is SortDirection.ASC:
            self._descriptor = SortDescriptor(column_id, SortDirection.DESC)
        else:
            self._descriptor = None
        return self._descriptor

    def set_sort(
        self,
        column_id: str,
        direction: Union[SortDirection, str] = SortDirection.ASC,
    ) -> Optional[SortDescriptor]:
        """Set the active descriptor directly. Invalid input is ignored."""
        if not self._can_sort(column_id):
            return self._descriptor
        try:
            direction = SortDirection(direction)
        except ValueError:
            return self._descriptor
        self._descriptor = SortDescriptor(column_id, direction)
        return self._descriptor

    def clear_sort(self) -> None:
        self._descriptor = None

    def _can_sort(self, column_id: str) -> bool:
        column = self._columns.get(column_id)
        return column is not None and column.sortable
