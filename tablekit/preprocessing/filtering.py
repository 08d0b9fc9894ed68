"""Row filtering for in-memory tables and the built-in column filter functions."""

import math
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..core.columns import ColumnDef, FilterFn
from ..core.config import debug_log
from ..core.models import ColumnFilter

# Global registry mapping filter function names to callables
_FILTER_FN_REGISTRY: Dict[str, FilterFn] = {}


def register_filter_fn(name: str):
    """
    Decorator to register a column filter function by name.

    Registered names can be used as ``ColumnDef.filter_fn``.

    Args:
        name: Unique name for the filter function

    Returns:
        Decorator function

    Example:
        @register_filter_fn("starts_with")
        def starts_with(cell_value, filter_value):
            return str(cell_value).lower().startswith(str(filter_value).lower())
    """

    def decorator(fn: FilterFn) -> FilterFn:
        if name in _FILTER_FN_REGISTRY:
            raise ValueError(
                f"Filter function '{name}' is already registered to "
                f"{_FILTER_FN_REGISTRY[name].__name__}"
            )
        _FILTER_FN_REGISTRY[name] = fn
        return fn

    return decorator


def get_filter_fn(name: str) -> FilterFn:
    """
    Get a filter function by its registered name.

    Raises:
        KeyError: If no filter function is registered with that name
    """
    if name not in _FILTER_FN_REGISTRY:
        available = list(_FILTER_FN_REGISTRY.keys())
        raise KeyError(
            f"No filter function registered with name '{name}'. "
            f"Available filter functions: {available}"
        )
    return _FILTER_FN_REGISTRY[name]


def list_filter_fns() -> Dict[str, FilterFn]:
    return _FILTER_FN_REGISTRY.copy()


# ---------------------------------------------------------------------------
# Built-in filter functions
# ---------------------------------------------------------------------------


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


@register_filter_fn("includes_string")
def includes_string(cell_value: Any, filter_value: Any) -> bool:
    """Case-insensitive substring match."""
    return _as_text(filter_value).lower() in _as_text(cell_value).lower()


@register_filter_fn("includes_string_sensitive")
def includes_string_sensitive(cell_value: Any, filter_value: Any) -> bool:
    return _as_text(filter_value) in _as_text(cell_value)


@register_filter_fn("equals_string")
def equals_string(cell_value: Any, filter_value: Any) -> bool:
    """Case-insensitive whole-string equality."""
    return _as_text(cell_value).lower() == _as_text(filter_value).lower()


@register_filter_fn("equals")
def equals(cell_value: Any, filter_value: Any) -> bool:
    return cell_value == filter_value


@register_filter_fn("weak_equals")
def weak_equals(cell_value: Any, filter_value: Any) -> bool:
    """Equality after converting both sides to text ("1" matches 1)."""
    return _as_text(cell_value) == _as_text(filter_value)


def _to_number(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


@register_filter_fn("in_number_range")
def in_number_range(cell_value: Any, filter_value: Any) -> bool:
    """
    Inclusive numeric range check.

    ``filter_value`` is a ``(min, max)`` pair where either bound may be None
    or "" for an open end. Swapped bounds are normalised. Any other filter
    value matches nothing; use ``"equals"`` (or ``"auto"``) for exact numbers.
    """
    if not isinstance(filter_value, (list, tuple)) or len(filter_value) != 2:
        return False
    number = _to_number(cell_value)
    if number is None:
        return False
    low, high = _to_number(filter_value[0]), _to_number(filter_value[1])
    if low is not None and high is not None and low > high:
        low, high = high, low
    if low is not None and number < low:
        return False
    if high is not None and number > high:
        return False
    return True


def _as_sequence(value: Any) -> Sequence[Any]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


@register_filter_fn("arr_includes")
def arr_includes(cell_value: Any, filter_value: Any) -> bool:
    """The cell (a list) contains the filter value."""
    return filter_value in _as_sequence(cell_value)


@register_filter_fn("arr_includes_all")
def arr_includes_all(cell_value: Any, filter_value: Any) -> bool:
    cells = _as_sequence(cell_value)
    return all(v in cells for v in _as_sequence(filter_value))


@register_filter_fn("arr_includes_some")
def arr_includes_some(cell_value: Any, filter_value: Any) -> bool:
    """The cell matches any of the filter values (e.g. a multi-select)."""
    cells = _as_sequence(cell_value)
    return any(v in cells for v in _as_sequence(filter_value))


def resolve_auto_filter_fn(sample_value: Any) -> FilterFn:
    """
    Pick a built-in filter function from a representative cell value.

    Strings use a case-insensitive substring match, numbers a range check,
    booleans and dates equality, lists membership, anything else text
    equality. Under ``"auto"`` a single number on a numeric column matches
    exactly and several values on a list column match any of them.
    """
    if isinstance(sample_value, str):
        return includes_string
    if isinstance(sample_value, bool):
        return equals
    if isinstance(sample_value, (int, float)):
        return in_number_range
    if isinstance(sample_value, (date, datetime)):
        return equals
    if isinstance(sample_value, (list, tuple, set, frozenset)):
        return arr_includes
    return weak_equals


def _auto_filter(resolved: FilterFn) -> FilterFn:
    def filter_fn(cell_value: Any, filter_value: Any) -> bool:
        # A text query typed against a non-text column matches on cell text.
        if isinstance(filter_value, str) and resolved is not includes_string:
            return includes_string(cell_value, filter_value)
        is_collection = isinstance(filter_value, (list, tuple, set, frozenset))
        # A single number on a numeric column is an exact match, not a range
        if resolved is in_number_range and not is_collection:
            return equals(cell_value, filter_value)
        # Several values against a list column (multi-select) match any of them
        if resolved is arr_includes and is_collection:
            return arr_includes_some(cell_value, filter_value)
        return resolved(cell_value, filter_value)

    return filter_fn


@register_filter_fn("auto")
def auto(cell_value: Any, filter_value: Any) -> bool:
    """Choose a filter function from this cell's own type."""
    return _auto_filter(resolve_auto_filter_fn(cell_value))(cell_value, filter_value)


# ---------------------------------------------------------------------------
# Row predicates
# ---------------------------------------------------------------------------


def _first_non_null(rows: Sequence[Any], column: ColumnDef) -> Any:
    for row in rows:
        value = column.get_value(row)
        if value is not None:
            return value
    return None


def resolve_filter_fn(column: ColumnDef, rows: Sequence[Any] = ()) -> FilterFn:
    """
    Resolve a column's filter function.

    ``"auto"`` is resolved from the first non-null cell of ``rows`` when rows
    are available, so the whole column is filtered consistently; without
    rows it falls back to per-cell resolution.
    """
    filter_fn = column.filter_fn
    if callable(filter_fn):
        return filter_fn
    if filter_fn == "auto" and rows:
        sample = _first_non_null(rows, column)
        if sample is not None:
            return _auto_filter(resolve_auto_filter_fn(sample))
    return get_filter_fn(filter_fn)


def build_row_predicate(
    columns: Dict[str, ColumnDef],
    column_filters: Tuple[ColumnFilter, ...],
    global_filter: str,
    rows: Sequence[Any] = (),
) -> Optional[Callable[[Any], bool]]:
    """
    Combine column filters (AND) and the global filter into one predicate.

    Args:
        columns: Column lookup by id
        column_filters: Active column filters; unknown columns are skipped
        global_filter: Free-text query; empty means inactive
        rows: Dataset used to resolve ``"auto"`` filter functions

    Returns:
        Predicate over rows, or None when no filter is active
    """
    checks: List[Tuple[ColumnDef, FilterFn, Any]] = []
    for column_filter in column_filters:
        column = columns.get(column_filter.column_id)
        if column is None:
            continue
        checks.append((column, resolve_filter_fn(column, rows), column_filter.value))

    query = global_filter.lower() if global_filter else ""
    searchable = [c for c in columns.values() if c.global_filterable]

    if not checks and not query:
        return None

    def predicate(row: Any) -> bool:
        for column, filter_fn, value in checks:
            if not filter_fn(column.get_value(row), value):
                return False
        if query:
            return any(query in column.render_text(row).lower() for column in searchable)
        return True

    return predicate


def filter_rows(
    rows: Sequence[Any],
    columns: Dict[str, ColumnDef],
    column_filters: Tuple[ColumnFilter, ...],
    global_filter: str,
) -> List[Any]:
    """
    Return the rows passing every column filter and the global filter.

    Row order is preserved.
    """
    predicate = build_row_predicate(columns, column_filters, global_filter, rows)
    if predicate is None:
        return list(rows)
    filtered = [row for row in rows if predicate(row)]
    debug_log(
        "TABLE",
        f"Filtered {len(rows):,} -> {len(filtered):,} rows "
        f"({len(column_filters)} column filter(s), global={global_filter!r})",
    )
    return filtered
