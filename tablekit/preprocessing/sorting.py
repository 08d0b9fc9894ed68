"""Stable single-column sorting of in-memory rows."""

import math
import numbers
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.columns import ColumnDef
from ..core.models import SortDescriptor


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def default_sort_key(value: Any) -> Tuple[int, Any]:
    """
    Sort key that orders mixed cell types without raising.

    Values are grouped by kind (numbers, then dates, then text, then
    anything else by its text) so incomparable types never meet. Text
    compares case-insensitively.
    """
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, numbers.Real):
        return (0, value)
    if isinstance(value, datetime):
        return (1, value.timestamp())
    if isinstance(value, date):
        return (1, datetime.combine(value, time()).timestamp())
    if isinstance(value, str):
        return (2, value.casefold())
    return (3, str(value))


def sort_rows(
    rows: Sequence[Any],
    columns: Dict[str, ColumnDef],
    descriptor: Optional[SortDescriptor],
) -> List[Any]:
    """
    Sort rows by the active descriptor.

    The sort is stable in both directions: rows with equal keys keep their
    relative input order. Missing values (None, NaN) always go last.
    Unknown columns leave the order unchanged.

    Args:
        rows: Rows to sort (not modified)
        columns: Column lookup by id
        descriptor: Active sort, or None for input order

    Returns:
        New list of rows in sorted order
    """
    if descriptor is None or descriptor.column_id not in columns:
        return list(rows)

    column = columns[descriptor.column_id]
    key_fn = column.sort_key or default_sort_key

    present: List[Tuple[Any, Any]] = []
    missing: List[Any] = []
    for row in rows:
        value = column.get_value(row)
        if _is_missing(value):
            missing.append(row)
        else:
            present.append((key_fn(value), row))

    # list.sort keeps equal elements in input order, also with reverse=True
    present.sort(key=lambda pair: pair[0], reverse=descriptor.descending)
    return [row for _, row in present] + missing
