"""Immutable snapshot types shared by the table models and engines."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class SortDirection(str, Enum):
    """Direction of the active sort descriptor."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class PaginationState:
    """Zero-based page index and page size."""

    page_index: int = 0
    page_size: int = 10


@dataclass(frozen=True)
class SortDescriptor:
    """The single active sort of a table."""

    column_id: str
    direction: SortDirection = SortDirection.ASC

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


@dataclass(frozen=True)
class ColumnFilter:
    """An active filter on one column. The value is opaque to the engine."""

    column_id: str
    value: Any


@dataclass(frozen=True)
class ActiveFilterView:
    """Display projection of a column filter (a removable chip)."""

    id: str
    label: str
    value: str


@dataclass(frozen=True)
class PaginationSummary:
    """
    Values for the pagination readout.

    Attributes:
        start_row: One-based index of the first visible row (0 when empty)
        end_row: One-based index of the last visible row
        total_rows: Row count across all pages
    """

    page_index: int
    page_size: int
    page_count: int
    total_rows: int
    start_row: int
    end_row: int
    can_previous_page: bool
    can_next_page: bool

    @property
    def page_number(self) -> int:
        return self.page_index + 1

    @property
    def display_page_count(self) -> int:
        """Page count for "Page N of M" labels, never 0."""
        return self.page_count or 1


@dataclass(frozen=True)
class PageResult:
    """The computed row window of a client-mode table."""

    rows: Tuple[Any, ...] = ()
    total_rows: int = 0
    page_count: int = 0


@dataclass(frozen=True)
class TableState:
    """
    Atomic snapshot of pagination, sorting and filters.

    Snapshots are handed to the host and never mutated afterwards; every
    change produces a new instance. ``sequence`` increases with each snapshot
    emitted by a server-mode engine so late fetch responses can be detected.
    """

    pagination: PaginationState = field(default_factory=PaginationState)
    sorting: Optional[SortDescriptor] = None
    column_filters: Tuple[ColumnFilter, ...] = ()
    global_filter: str = ""
    sequence: int = 0

    def filter_value(self, column_id: str) -> Any:
        for column_filter in self.column_filters:
            if column_filter.column_id == column_id:
                return column_filter.value
        return None

    def same_content(self, other: "TableState") -> bool:
        """Compare everything except the sequence token."""
        return (
            self.pagination == other.pagination
            and self.sorting == other.sorting
            and self.column_filters == other.column_filters
            and self.global_filter == other.global_filter
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict rendering for hosts forwarding the state to a backend."""
        sorting: List[Dict[str, Any]] = []
        if self.sorting is not None:
            sorting.append(
                {
                    "id": self.sorting.column_id,
                    "desc": self.sorting.descending,
                }
            )
        return {
            "pagination": {
                "page_index": self.pagination.page_index,
                "page_size": self.pagination.page_size,
            },
            "sorting": sorting,
            "global_filter": self.global_filter,
            "column_filters": [
                {"id": f.column_id, "value": f.value} for f in self.column_filters
            ],
            "sequence": self.sequence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableState":
        """
        Build a state from a (possibly partial) dict as produced by to_dict().

        Missing sections fall back to defaults. Only the first sorting entry is
        used since tables sort by a single column.
        """
        pagination_data = data.get("pagination") or {}
        pagination = PaginationState(
            page_index=int(pagination_data.get("page_index", 0)),
            page_size=int(pagination_data.get("page_size", PaginationState().page_size)),
        )

        sorting = None
        sorting_data = data.get("sorting") or []
        if sorting_data:
            first = sorting_data[0]
            sorting = SortDescriptor(
                column_id=first["id"],
                direction=SortDirection.DESC if first.get("desc") else SortDirection.ASC,
            )

        column_filters = tuple(
            ColumnFilter(column_id=item["id"], value=item.get("value"))
            for item in data.get("column_filters") or []
        )

        return cls(
            pagination=pagination,
            sorting=sorting,
            column_filters=column_filters,
            global_filter=data.get("global_filter") or "",
            sequence=int(data.get("sequence", 0)),
        )
