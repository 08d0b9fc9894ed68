"""Column definitions supplied by the host."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Union

Accessor = Union[str, Callable[[Any], Any]]
FilterFn = Callable[[Any, Any], bool]


@dataclass(frozen=True)
class ColumnDef:
    """
    Read-only configuration of a single table column.

    Attributes:
        id: Unique column identifier used by sorting and filtering
        header: Display header. Non-string headers (e.g. render callables) are
            allowed; active-filter chips then fall back to the column id.
        accessor: Key or attribute name of the cell value in a row, or a
            callable ``row -> value``. Defaults to ``id``.
        sortable: Whether toggle_sort() is allowed on this column
        filterable: Whether column filters may be set on this column
        global_filterable: Whether the global search looks at this column
        filter_fn: Callable ``(cell_value, filter_value) -> bool`` or the name
            of a registered filter function (default ``"auto"``)
        sort_key: Optional callable mapping a cell value to its sort key
        render: Optional callable turning a cell value into displayed text
    """

    id: str
    header: Any = None
    accessor: Optional[Accessor] = None
    sortable: bool = True
    filterable: bool = True
    global_filterable: bool = True
    filter_fn: Union[str, FilterFn] = "auto"
    sort_key: Optional[Callable[[Any], Any]] = None
    render: Optional[Callable[[Any], Any]] = None

    @property
    def label(self) -> str:
        """Header text for chips, or the id when the header is not a string."""
        if isinstance(self.header, str):
            return self.header
        return self.id

    def get_value(self, row: Any) -> Any:
        """Extract this column's cell value from a row."""
        accessor = self.accessor if self.accessor is not None else self.id
        if callable(accessor):
            return accessor(row)
        if isinstance(row, Mapping):
            return row.get(accessor)
        return getattr(row, accessor, None)

    def render_text(self, row: Any) -> str:
        """Displayed text of this column's cell, used by the global filter."""
        value = self.get_value(row)
        if self.render is not None:
            value = self.render(value)
        if value is None:
            return ""
        return str(value)


def index_columns(columns: Iterable[ColumnDef]) -> Dict[str, ColumnDef]:
    """
    Build an ordered id -> ColumnDef lookup.

    Raises:
        ValueError: If two columns share an id
    """
    index: Dict[str, ColumnDef] = {}
    for column in columns:
        if column.id in index:
            raise ValueError(
                f"Duplicate column id '{column.id}'. "
                f"Column ids must be unique within a table."
            )
        index[column.id] = column
    return index
